"""Turns a failed upload into the one message shown to the user."""

import logging

from uploadgate.core.config import SiteUploadSettings
from uploadgate.models.upload_models import TransportFailure
from uploadgate.models.upload_models import TransportFailureKind
from uploadgate.models.upload_models import TransportResult
from uploadgate.services.media_classifier import classify
from uploadgate.services.messages import LoggingSink
from uploadgate.services.messages import MessageCatalog
from uploadgate.services.messages import MessageSink
from uploadgate.services.messages import default_catalog

logger = logging.getLogger(__name__)

STATUS_NO_RESPONSE = 0
STATUS_TOO_LARGE = 413
STATUS_UNPROCESSABLE = 422


def bucket_failure(result: TransportResult, site: SiteUploadSettings) -> TransportFailure:
    """Sorts *result* into the failure kind that decides its message."""
    if result.status is not None:
        # No headers from the server, or the client refuses to expose them.
        if result.status == STATUS_NO_RESPONSE:
            return TransportFailure(kind=TransportFailureKind.NO_RESPONSE)

        # Entity too large, usually answered by the web server itself.
        if result.status == STATUS_TOO_LARGE:
            media_type = classify(result.attempted_file_name or "")
            return TransportFailure(
                kind=TransportFailureKind.TOO_LARGE,
                media_type=media_type,
                max_size_kb=site.max_size_kb(media_type),
            )

        if result.status == STATUS_UNPROCESSABLE and result.response_json is not None:
            body = result.response_json
            if body.message:
                return TransportFailure(kind=TransportFailureKind.SERVER_REJECTED, messages=[body.message])
            if body.errors:
                return TransportFailure(kind=TransportFailureKind.SERVER_REJECTED_LIST, messages=list(body.errors))

    elif result.errors:
        return TransportFailure(kind=TransportFailureKind.SERVER_REJECTED_LIST, messages=list(result.errors))

    return TransportFailure(kind=TransportFailureKind.UNKNOWN)


def failure_message(failure: TransportFailure, catalog: MessageCatalog | None = None) -> str:
    catalog = catalog or default_catalog
    if failure.kind is TransportFailureKind.TOO_LARGE:
        return catalog.t("post.errors.file_too_large", max_size_kb=failure.max_size_kb)
    if failure.kind in (TransportFailureKind.SERVER_REJECTED, TransportFailureKind.SERVER_REJECTED_LIST):
        return "\n".join(failure.messages)
    return catalog.t("post.errors.upload")


def present(
    result: TransportResult,
    site: SiteUploadSettings,
    sink: MessageSink | None = None,
    catalog: MessageCatalog | None = None,
) -> None:
    """Shows exactly one message for *result* through *sink*."""
    logger.warning("Upload failed (status=%s)", result.status)
    present_failure(bucket_failure(result, site), sink, catalog)


def present_failure(
    failure: TransportFailure,
    sink: MessageSink | None = None,
    catalog: MessageCatalog | None = None,
) -> None:
    """Shows the message for an already bucketed *failure*."""
    logger.warning("Upload failure bucketed as %s", failure.kind.value)
    (sink or LoggingSink())(failure_message(failure, catalog))
