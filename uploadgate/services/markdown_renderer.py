"""Renders a completed upload as the markdown inserted into a post."""

import re

from uploadgate.models.upload_models import MediaType
from uploadgate.models.upload_models import UploadRecord
from uploadgate.services.media_classifier import classify
from uploadgate.services.messages import MessageCatalog
from uploadgate.services.messages import default_catalog
from uploadgate.services.messages import to_human_size

GUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)

# Characters that would break the ![alt|size](url) syntax.
_MARKDOWN_UNSAFE = re.compile(r"[\[\]|]")


def is_guid(value: str) -> bool:
    return GUID_PATTERN.match(value) is not None


def markdown_name_from_file_name(
    file_name: str,
    apple_device: bool = False,
    catalog: MessageCatalog | None = None,
) -> str:
    """Returns the alt text for *file_name*: its name without the extension.

    Apple devices name camera pictures with a GUID; those get a generic alt
    text instead. Markdown-breaking characters are stripped from the result,
    placeholder included.
    """
    name = file_name[: file_name.rfind(".")] if "." in file_name else ""
    if apple_device and is_guid(_MARKDOWN_UNSAFE.sub("", name)):
        name = (catalog or default_catalog).t("upload_selector.default_image_alt_text")
    return _MARKDOWN_UNSAFE.sub("", name)


def render(
    record: UploadRecord,
    apple_device: bool = False,
    catalog: MessageCatalog | None = None,
) -> str:
    """Returns the markdown for *record*, chosen by its media type."""
    media_type = classify(record.original_filename)
    url = record.short_url or record.url

    if media_type is MediaType.IMAGE:
        name = markdown_name_from_file_name(record.original_filename, apple_device, catalog)
        if record.thumbnail_width is None or record.thumbnail_height is None:
            return f"![{name}]({url})"
        return f"![{name}|{record.thumbnail_width}x{record.thumbnail_height}]({url})"

    if media_type in (MediaType.AUDIO, MediaType.VIDEO):
        name = markdown_name_from_file_name(record.original_filename, apple_device, catalog)
        return f"![{name}|{media_type.value}]({url})"

    return f"[{record.original_filename}|attachment]({url}) ({to_human_size(record.filesize)})"
