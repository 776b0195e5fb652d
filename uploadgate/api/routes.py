import logging
from uuid import uuid4

from fastapi import APIRouter
from fastapi import Depends
from pydantic import BaseModel
from pydantic import Field as PydanticField

from uploadgate.core import config
from uploadgate.core.config import SiteUploadSettings
from uploadgate.core.security import verify_api_key
from uploadgate.models.upload_models import MediaType
from uploadgate.models.upload_models import RejectionReason
from uploadgate.models.upload_models import TransportFailureKind
from uploadgate.models.upload_models import TransportResult
from uploadgate.models.upload_models import UploadCandidate
from uploadgate.models.upload_models import UploadRecord
from uploadgate.models.upload_models import UserContext
from uploadgate.models.upload_models import ValidationMode
from uploadgate.services import error_presenter
from uploadgate.services import markdown_renderer
from uploadgate.services import upload_validator
from uploadgate.services.extension_policy import ExtensionPolicy
from uploadgate.services.messages import CollectingSink
from uploadgate.services.messages import rejection_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/uploads", dependencies=[Depends(verify_api_key)])


def get_site_settings() -> SiteUploadSettings:
    """Returns the current site settings snapshot (overridable in tests)."""
    return config.site_settings


class ValidatePayload(BaseModel):
    candidates: list[UploadCandidate] = PydanticField(default_factory=list, description="Files submitted together.")
    user: UserContext | None = PydanticField(default=None, description="The requester; omit for anonymous uploads.")
    mode: ValidationMode = PydanticField(default_factory=ValidationMode)


class ValidateResponse(BaseModel):
    accepted: bool
    reason: RejectionReason | None = None
    media_type: MediaType | None = None
    authorized_extensions: str | None = None
    message: str | None = None


class MarkdownResponse(BaseModel):
    markdown: str


class FailureResponse(BaseModel):
    kind: TransportFailureKind
    message: str


class PolicyResponse(BaseModel):
    authorized_extensions: list[str]
    authorized_image_extensions: str
    authorizes_all: bool
    authorizes_any: bool
    allows_images: bool
    allows_attachments: bool
    upload_icon: str


@router.post("/validate")
def validate_upload(
    payload: ValidatePayload,
    site: SiteUploadSettings = Depends(get_site_settings),
) -> ValidateResponse:
    """Checks whether the submitted file may be uploaded.

    Rejections are answered with 200 and ``accepted: false``; the response
    carries the reason and the message to show.
    """
    request_id = str(uuid4())
    logger.info("[%s] /validate called with %d candidate(s)", request_id, len(payload.candidates))

    outcome = upload_validator.validate(payload.candidates, payload.user, site, payload.mode)
    return ValidateResponse(
        accepted=outcome.accepted,
        reason=outcome.reason,
        media_type=outcome.media_type,
        authorized_extensions=outcome.authorized_extensions,
        message=rejection_message(outcome),
    )


@router.post("/markdown")
def upload_markdown(record: UploadRecord, apple_device: bool | None = None) -> MarkdownResponse:
    """Renders the markdown for a completed upload."""
    if apple_device is None:
        apple_device = config.settings.apple_device_hint
    return MarkdownResponse(markdown=markdown_renderer.render(record, apple_device=apple_device))


@router.post("/failures")
def upload_failure(
    result: TransportResult,
    site: SiteUploadSettings = Depends(get_site_settings),
) -> FailureResponse:
    """Returns the single message to show for a failed upload."""
    failure = error_presenter.bucket_failure(result, site)
    sink = CollectingSink()
    error_presenter.present_failure(failure, sink=sink)
    return FailureResponse(kind=failure.kind, message=sink.last or "")


@router.get("/policy")
def upload_policy(
    staff: bool = False,
    site: SiteUploadSettings = Depends(get_site_settings),
) -> PolicyResponse:
    """Describes what the requester may upload, for upload buttons and hints."""
    policy = ExtensionPolicy.from_settings(site)
    return PolicyResponse(
        authorized_extensions=policy.allowed_extensions(staff),
        authorized_image_extensions=policy.authorized_image_extensions(staff),
        authorizes_all=policy.authorizes_all(staff),
        authorizes_any=policy.authorizes_any(staff),
        allows_images=policy.allows_images(staff),
        allows_attachments=policy.allows_attachments(staff),
        upload_icon=policy.upload_icon(staff),
    )
