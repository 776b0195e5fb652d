"""Application and site upload configuration.

This module defines the settings using Pydantic's BaseSettings. Values are
loaded from environment variables or an .env file, with type validation and
default values.

The site upload settings are frozen: a snapshot never changes once loaded,
which lets the extension policy compile it once and reuse the result.
"""

from pydantic import Field
from pydantic import ValidationError
from pydantic import field_validator
from pydantic_settings import BaseSettings

from uploadgate.core.exceptions import ConfigurationError
from uploadgate.models.upload_models import MediaType

# Default list of CORS allowed origins
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8000",
    "https://localhost:3000",
    "https://localhost:8000",
]


class SiteUploadSettings(BaseSettings):
    """Site-configured upload policy.

    Attributes:
        authorized_extensions: ``|``-delimited extensions any user may upload, or ``*``.
        authorized_extensions_for_staff: Additional extensions for staff, or ``*``.
        max_image_size_kb: Size limit for images, in kilobytes.
        max_attachment_size_kb: Size limit for every other upload, in kilobytes.
        newuser_max_images: Images a new user may embed in a post.
        newuser_max_attachments: Attachments a new user may add to a post.
    """

    authorized_extensions: str = Field(default="jpg|jpeg|png|gif|heic|heif")
    authorized_extensions_for_staff: str = Field(default="")
    max_image_size_kb: int = Field(default=4096, ge=0)
    max_attachment_size_kb: int = Field(default=4096, ge=0)
    newuser_max_images: int = Field(default=1, ge=0)
    newuser_max_attachments: int = Field(default=0, ge=0)

    model_config = {
        "env_file": ".env",
        "env_prefix": "",
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("authorized_extensions", "authorized_extensions_for_staff", mode="before")  # type: ignore
    @classmethod
    def none_as_empty(cls, v: str | None) -> str:
        return "" if v is None else v

    def max_size_kb(self, media_type: MediaType) -> int:
        """Returns the size limit that applies to *media_type*.

        Only images have a dedicated limit; audio and video are attachments
        as far as the site limits are concerned.
        """
        if media_type is MediaType.IMAGE:
            return self.max_image_size_kb
        return self.max_attachment_size_kb

    def newuser_max_uploads(self, media_type: MediaType) -> int:
        """Returns how many uploads of *media_type* a new user may add to a post."""
        if media_type is MediaType.IMAGE:
            return self.newuser_max_images
        return self.newuser_max_attachments


class Settings(BaseSettings):
    """Manages application settings, loading them from environment variables or an .env file.

    Attributes:
        api_key: API key securing the HTTP endpoints.
        cors_allowed_origins: List of allowed origins for CORS.
        apple_device_hint: Default for the screenshot-name heuristic when a
            request does not say which platform the upload came from.
    """

    api_key: str | None = Field(default=None)

    cors_allowed_origins: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),
    )

    apple_device_hint: bool = Field(default=False)

    model_config = {
        "env_file": ".env",
        "env_prefix": "",
        "extra": "ignore",
    }

    @field_validator("cors_allowed_origins", mode="before")  # type: ignore
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str] | None) -> list[str]:
        """Assembles the list of CORS allowed origins.

        If 'v' is a string, it splits it by commas. If 'v' is already a list,
        it's used directly. Otherwise, returns the default list of origins.
        """
        if isinstance(v, str) and v:
            return [origin.strip() for origin in v.split(",")]
        elif isinstance(v, list):
            return v
        return list(DEFAULT_CORS_ORIGINS)


def load_site_settings(**overrides: object) -> SiteUploadSettings:
    """Loads a site settings snapshot, failing with ConfigurationError when it is malformed."""
    try:
        return SiteUploadSettings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid site upload settings: {e}") from e


settings = Settings()
site_settings = load_site_settings()
