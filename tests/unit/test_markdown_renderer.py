import pytest

from uploadgate.models.upload_models import UploadRecord
from uploadgate.services.markdown_renderer import is_guid
from uploadgate.services.markdown_renderer import markdown_name_from_file_name
from uploadgate.services.markdown_renderer import render
from uploadgate.services.messages import MessageCatalog

GUID = "0d7e5b4a-8c2f-4b1e-9a3d-6f2e1c0b9a87"


def test_image_markdown():
    record = UploadRecord(original_filename="cat.jpg", url="/uploads/cat.jpg", short_url="u", thumbnail_width=100, thumbnail_height=80)
    assert render(record) == "![cat|100x80](u)"


def test_image_markdown_falls_back_to_url():
    record = UploadRecord(original_filename="cat.png", url="/uploads/cat.png", thumbnail_width=10, thumbnail_height=20)
    assert render(record) == "![cat|10x20](/uploads/cat.png)"


def test_image_name_strips_markdown_characters():
    record = UploadRecord(original_filename="my [best]|shot.png", url="x", short_url="u", thumbnail_width=1, thumbnail_height=2)
    assert render(record) == "![my bestshot|1x2](u)"


@pytest.mark.parametrize("name, media", [("song.mp3", "audio"), ("clip.mp4", "video"), ("clip.ogg", "audio")])
def test_playable_media_markdown(name, media):
    record = UploadRecord(original_filename=name, url="x", short_url="upload://abc")
    stem = name.rsplit(".", 1)[0]
    assert render(record) == f"![{stem}|{media}](upload://abc)"


def test_attachment_markdown_keeps_the_full_name_and_size():
    record = UploadRecord(original_filename="report.final.pdf", url="x", short_url="upload://r", filesize=1536)
    assert render(record) == "[report.final.pdf|attachment](upload://r) (1.5 KB)"


def test_render_is_deterministic():
    record = UploadRecord(original_filename="a.zip", url="x", short_url="s", filesize=10)
    assert render(record) == render(record)


def test_markdown_name_uses_text_before_last_dot():
    assert markdown_name_from_file_name("archive.tar.gz") == "archive.tar"
    assert markdown_name_from_file_name("noextension") == ""


def test_guid_names_get_placeholder_on_apple_devices():
    assert markdown_name_from_file_name(f"{GUID}.jpeg", apple_device=True) == "image"
    assert markdown_name_from_file_name(f"{GUID}.jpeg", apple_device=False) == GUID
    assert markdown_name_from_file_name("holiday.jpeg", apple_device=True) == "holiday"


def test_guid_placeholder_comes_from_the_catalog():
    catalog = MessageCatalog({"upload_selector.default_image_alt_text": "immagine"})
    record = UploadRecord(original_filename=f"{GUID.upper()}.png", url="x", short_url="u", thumbnail_width=3, thumbnail_height=4)
    assert render(record, apple_device=True, catalog=catalog) == "![immagine|3x4](u)"


def test_is_guid():
    assert is_guid(GUID)
    assert not is_guid("not-a-guid")
    assert not is_guid(GUID + "0")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("song.mp3", "![song|audio](/u/file)"),
        ("clip.webm", "![clip|video](/u/file)"),
        ("doc.pdf", "[doc.pdf|attachment](/u/file) (0 Bytes)"),
    ],
)
def test_missing_short_url_falls_back_to_url(name, expected):
    record = UploadRecord(original_filename=name, url="/u/file")
    assert render(record) == expected
    assert "None" not in render(record)


def test_image_without_thumbnail_size_omits_the_dimensions():
    record = UploadRecord(original_filename="cat.png", url="/u/cat.png", short_url="u", thumbnail_width=100)
    assert render(record) == "![cat](u)"


def test_guid_placeholder_is_stripped_of_markdown_characters():
    catalog = MessageCatalog({"upload_selector.default_image_alt_text": "[photo|shot]"})
    assert markdown_name_from_file_name(f"{GUID}.jpg", apple_device=True, catalog=catalog) == "photoshot"


def test_guid_wrapped_in_markdown_characters_still_counts_as_guid():
    assert markdown_name_from_file_name(f"[{GUID}].jpg", apple_device=True) == "image"
