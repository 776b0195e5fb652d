import pytest
from pydantic import ValidationError

from uploadgate.core.config import DEFAULT_CORS_ORIGINS
from uploadgate.core.config import load_site_settings
from uploadgate.core.config import Settings
from uploadgate.core.config import SiteUploadSettings
from uploadgate.core.exceptions import ConfigurationError
from uploadgate.models.upload_models import MediaType


def test_site_settings_defaults():
    site = SiteUploadSettings()
    assert site.authorized_extensions == "jpg|jpeg|png|gif|heic|heif"
    assert site.authorized_extensions_for_staff == ""
    assert isinstance(site.max_image_size_kb, int)


def test_site_settings_load_from_environment(monkeypatch):
    monkeypatch.setenv("AUTHORIZED_EXTENSIONS", "pdf|txt")
    monkeypatch.setenv("MAX_ATTACHMENT_SIZE_KB", "2048")
    site = SiteUploadSettings()
    assert site.authorized_extensions == "pdf|txt"
    assert site.max_attachment_size_kb == 2048


def test_site_settings_are_frozen_and_hashable():
    site = SiteUploadSettings(authorized_extensions="png")
    with pytest.raises(ValidationError):
        site.authorized_extensions = "*"
    assert hash(site) == hash(SiteUploadSettings(authorized_extensions="png"))


@pytest.mark.parametrize(
    "media_type, expected",
    [
        (MediaType.IMAGE, 500),
        (MediaType.ATTACHMENT, 900),
        (MediaType.AUDIO, 900),
        (MediaType.VIDEO, 900),
    ],
)
def test_max_size_kb_per_media_type(media_type, expected):
    site = SiteUploadSettings(max_image_size_kb=500, max_attachment_size_kb=900)
    assert site.max_size_kb(media_type) == expected


def test_cors_origins_from_comma_separated_string():
    s = Settings(cors_allowed_origins="https://a.example, https://b.example")
    assert s.cors_allowed_origins == ["https://a.example", "https://b.example"]


def test_cors_origins_default_when_empty():
    s = Settings(cors_allowed_origins="")
    assert s.cors_allowed_origins == DEFAULT_CORS_ORIGINS


@pytest.mark.parametrize(
    "media_type, expected",
    [
        (MediaType.IMAGE, 3),
        (MediaType.ATTACHMENT, 0),
        (MediaType.AUDIO, 0),
        (MediaType.VIDEO, 0),
    ],
)
def test_newuser_max_uploads_per_media_type(media_type, expected):
    site = SiteUploadSettings(newuser_max_images=3, newuser_max_attachments=0)
    assert site.newuser_max_uploads(media_type) == expected


def test_load_site_settings_applies_overrides():
    site = load_site_settings(authorized_extensions="csv")
    assert site.authorized_extensions == "csv"


def test_load_site_settings_rejects_malformed_values(monkeypatch):
    monkeypatch.setenv("MAX_IMAGE_SIZE_KB", "-1")
    with pytest.raises(ConfigurationError) as exc:
        load_site_settings()
    assert "max_image_size_kb" in str(exc.value)


def test_load_site_settings_rejects_non_numeric_limits():
    with pytest.raises(ConfigurationError):
        load_site_settings(newuser_max_attachments="many")
