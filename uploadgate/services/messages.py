"""User-facing message lookup and delivery.

``MessageCatalog`` stands in for the site's localization layer: messages are
looked up by key and rendered with jinja2. Sinks receive the rendered message;
where it ends up (a dialog, a JSON response, the log) is up to the caller.
"""

import logging
from collections.abc import Mapping
from typing import Protocol

import jinja2

from uploadgate.core.exceptions import MessageCatalogError
from uploadgate.models.upload_models import MediaType
from uploadgate.models.upload_models import RejectionReason
from uploadgate.models.upload_models import ValidationOutcome

logger = logging.getLogger(__name__)

# Shared environment; StrictUndefined turns a missing parameter into an error.
env = jinja2.Environment(undefined=jinja2.StrictUndefined, autoescape=False)

DEFAULT_MESSAGES: dict[str, str] = {
    "post.errors.upload": "Sorry, there was an error uploading that file. Please try again.",
    "post.errors.file_too_large": (
        "Sorry, that file is too big (maximum size is {{ max_size_kb }}kb). "
        "Why not upload your large file to a cloud sharing service, then paste the link?"
    ),
    "post.errors.too_many_uploads": "Sorry, you can only upload one file at a time.",
    "post.errors.upload_not_authorized": (
        "Sorry, the file you are trying to upload is not authorized "
        "(authorized extensions: {{ authorized_extensions }})."
    ),
    "post.errors.no_file": "Sorry, no file was selected for upload.",
    "post.errors.no_extensions_authorized": "Sorry, uploads are not enabled on this site.",
    "post.errors.image_upload_not_allowed_for_new_user": "Sorry, new users can not upload images.",
    "post.errors.attachment_upload_not_allowed_for_new_user": "Sorry, new users can not upload attachments.",
    "post.errors.audio_upload_not_allowed_for_new_user": "Sorry, new users can not upload audio.",
    "post.errors.video_upload_not_allowed_for_new_user": "Sorry, new users can not upload videos.",
    "user.invited.bulk_invite.error": "Sorry, file should be CSV format.",
    "upload_selector.default_image_alt_text": "image",
}

# Storage units above bytes, in powers of 1024.
_STORAGE_UNITS = ("KB", "MB", "GB", "TB")


class MessageCatalog:
    """Looks up messages by key and fills in their parameters."""

    def __init__(self, messages: Mapping[str, str] | None = None) -> None:
        self._messages = dict(DEFAULT_MESSAGES if messages is None else messages)
        self._templates: dict[str, jinja2.Template] = {}

    def t(self, key: str, **params: object) -> str:
        try:
            source = self._messages[key]
        except KeyError as e:
            raise MessageCatalogError(f"Unknown message key: {key}") from e

        template = self._templates.get(key)
        if template is None:
            template = env.from_string(source)
            self._templates[key] = template

        try:
            return template.render(**params)
        except jinja2.UndefinedError as e:
            raise MessageCatalogError(f"Missing parameter for message '{key}': {e}") from e


default_catalog = MessageCatalog()


def to_human_size(size_bytes: int) -> str:
    """Formats a byte count as ``500 Bytes``, ``1 KB`` or ``1.5 MB``."""
    if size_bytes < 1024:
        return "1 Byte" if size_bytes == 1 else f"{size_bytes} Bytes"

    size = float(size_bytes)
    iterations = 0
    while size >= 1024 and iterations < len(_STORAGE_UNITS):
        size /= 1024
        iterations += 1

    unit = _STORAGE_UNITS[iterations - 1]
    if size.is_integer():
        return f"{int(size)} {unit}"
    return f"{size:.1f} {unit}"


def new_user_message_key(media_type: MediaType) -> str:
    return f"post.errors.{media_type.value}_upload_not_allowed_for_new_user"


def rejection_message(outcome: ValidationOutcome, catalog: MessageCatalog | None = None) -> str | None:
    """Renders the message for a rejected outcome; None when it was accepted."""
    if outcome.accepted:
        return None
    catalog = catalog or default_catalog

    reason = outcome.reason
    if reason is RejectionReason.TOO_MANY_UPLOADS:
        return catalog.t("post.errors.too_many_uploads")
    if reason is RejectionReason.NO_EXTENSIONS_AUTHORIZED:
        return catalog.t("post.errors.no_extensions_authorized")
    if reason in (RejectionReason.NOT_AUTHORIZED_IMAGE, RejectionReason.NOT_AUTHORIZED_FILE):
        return catalog.t(
            "post.errors.upload_not_authorized",
            authorized_extensions=outcome.authorized_extensions or "",
        )
    if reason is RejectionReason.CSV_ONLY:
        return catalog.t("user.invited.bulk_invite.error")
    if reason is RejectionReason.NEW_USER_RESTRICTED:
        return catalog.t(new_user_message_key(outcome.media_type or MediaType.ATTACHMENT))
    return catalog.t("post.errors.no_file")


class MessageSink(Protocol):
    def __call__(self, message: str) -> None: ...


class LoggingSink:
    """Sink for callers without a display surface: the message goes to the log."""

    def __call__(self, message: str) -> None:
        logger.warning("Upload message: %s", message)


class CollectingSink:
    """Keeps every message it receives, in order."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)

    @property
    def last(self) -> str | None:
        return self.messages[-1] if self.messages else None
