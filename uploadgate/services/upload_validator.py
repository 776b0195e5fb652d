"""Decides whether a single file may be uploaded.

``validate`` applies an ordered chain of rules to the submitted candidates;
the first rule that decides ends the chain. Rejections come back as a
``ValidationOutcome`` value, never as an exception, and carry what the caller
needs to word the message.
"""

import logging
import re
from collections.abc import Sequence

from uploadgate.core.config import SiteUploadSettings
from uploadgate.models.upload_models import RejectionReason
from uploadgate.models.upload_models import UploadCandidate
from uploadgate.models.upload_models import UserContext
from uploadgate.models.upload_models import ValidationMode
from uploadgate.models.upload_models import ValidationOutcome
from uploadgate.services.extension_policy import ExtensionPolicy
from uploadgate.services.media_classifier import classify
from uploadgate.services.media_classifier import is_image

logger = logging.getLogger(__name__)

CSV_PATTERN = re.compile(r"\.csv$", re.IGNORECASE)

# Name given to an image pasted from the clipboard, which arrives without one.
PASTED_IMAGE_NAME = "image.png"
PASTED_IMAGE_MIME_TYPE = "image/png"


def upload_name(candidate: UploadCandidate) -> str | None:
    """Returns the name to validate *candidate* under."""
    if candidate.is_pasted_without_name and candidate.mime_type == PASTED_IMAGE_MIME_TYPE:
        return PASTED_IMAGE_NAME
    return candidate.name or None


def validate(
    candidates: Sequence[UploadCandidate] | None,
    user: UserContext | None,
    site: SiteUploadSettings,
    mode: ValidationMode | None = None,
) -> ValidationOutcome:
    """Validates an upload request made of *candidates*.

    Args:
        candidates: The files submitted together. Only one is ever accepted.
        user: The requester, or None for an anonymous caller.
        site: The site upload settings snapshot.
        mode: Switches for the upload surface; defaults to none set.

    Returns:
        The outcome. A rejection names its reason.
    """
    if not candidates:
        return _rejected(RejectionReason.NO_FILE)

    if len(candidates) > 1:
        return _rejected(RejectionReason.TOO_MANY_UPLOADS)

    mode = mode or ValidationMode()
    if mode.skip_validation:
        return ValidationOutcome.accept()

    candidate = candidates[0]
    staff = bool(user and user.staff)
    policy = ExtensionPolicy.from_settings(site)

    if not policy.authorizes_any(staff):
        return _rejected(RejectionReason.NO_EXTENSIONS_AUTHORIZED)

    name = upload_name(candidate)
    if not name:
        return _rejected(RejectionReason.NO_FILE)

    if mode.allow_staff_to_upload_any_file_in_pm and candidate.is_private_message and staff:
        return ValidationOutcome.accept()

    if mode.images_only:
        if not is_image(name) and not policy.is_authorized_image(name, staff):
            return _rejected(
                RejectionReason.NOT_AUTHORIZED_IMAGE,
                authorized_extensions=policy.authorized_image_extensions(staff),
            )
    elif mode.csv_only:
        if not CSV_PATTERN.search(name):
            return _rejected(RejectionReason.CSV_ONLY)
    elif not policy.authorizes_all(staff) and not policy.is_authorized_file(name, staff):
        return _rejected(
            RejectionReason.NOT_AUTHORIZED_FILE,
            authorized_extensions=policy.authorized_extensions(staff),
        )

    if not mode.bypass_new_user_restriction and user is not None:
        media_type = classify(name)
        if not user.is_allowed_to_upload_a_file(media_type, site):
            return _rejected(RejectionReason.NEW_USER_RESTRICTED, media_type=media_type)

    return ValidationOutcome.accept()


def _rejected(reason: RejectionReason, **data: object) -> ValidationOutcome:
    logger.info("Upload rejected: %s", reason.value)
    return ValidationOutcome.reject(reason, **data)
