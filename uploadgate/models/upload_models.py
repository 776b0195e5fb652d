from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

if TYPE_CHECKING:
    from uploadgate.core.config import SiteUploadSettings


class MediaType(str, Enum):
    """Media category of an upload, derived from its file name."""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    ATTACHMENT = "attachment"


class UserContext(BaseModel):
    """The requester as seen by the upload policy.

    ``trust_level`` 0 marks a new user. New users may only upload a media
    type when the site grants new users at least one of it.
    """

    model_config = ConfigDict(frozen=True)

    staff: bool = False
    trust_level: int = 1

    def is_allowed_to_upload_a_file(self, media_type: MediaType, site: "SiteUploadSettings") -> bool:
        if self.staff or self.trust_level > 0:
            return True
        return site.newuser_max_uploads(media_type) > 0


class UploadCandidate(BaseModel):
    """A file the user is about to upload."""

    name: str | None = None
    mime_type: str | None = None
    is_private_message: bool = False
    is_pasted_without_name: bool = False


class ValidationMode(BaseModel):
    """Per-call switches that narrow or relax the extension policy."""

    model_config = ConfigDict(frozen=True)

    skip_validation: bool = False
    images_only: bool = False
    csv_only: bool = False
    allow_staff_to_upload_any_file_in_pm: bool = False
    bypass_new_user_restriction: bool = False


class RejectionReason(str, Enum):
    NO_FILE = "no_file"
    TOO_MANY_UPLOADS = "too_many_uploads"
    NO_EXTENSIONS_AUTHORIZED = "no_extensions_authorized"
    NOT_AUTHORIZED_IMAGE = "not_authorized_image"
    NOT_AUTHORIZED_FILE = "not_authorized_file"
    CSV_ONLY = "csv_only"
    NEW_USER_RESTRICTED = "new_user_restricted"


class ValidationOutcome(BaseModel):
    """Result of validating an upload.

    A rejection carries what its message needs: ``authorized_extensions`` for
    the two not-authorized reasons, ``media_type`` for the new-user one.
    """

    model_config = ConfigDict(frozen=True)

    accepted: bool
    reason: RejectionReason | None = None
    authorized_extensions: str | None = None
    media_type: MediaType | None = None

    @classmethod
    def accept(cls) -> "ValidationOutcome":
        return cls(accepted=True)

    @classmethod
    def reject(
        cls,
        reason: RejectionReason,
        authorized_extensions: str | None = None,
        media_type: MediaType | None = None,
    ) -> "ValidationOutcome":
        return cls(
            accepted=False,
            reason=reason,
            authorized_extensions=authorized_extensions,
            media_type=media_type,
        )


class UploadRecord(BaseModel):
    """Metadata of a completed upload."""

    original_filename: str
    url: str
    short_url: str | None = None
    thumbnail_width: int | None = None
    thumbnail_height: int | None = None
    filesize: int = 0


class TransportResponseBody(BaseModel):
    """JSON body the upload server returned with an error status."""

    message: str | None = None
    errors: list[str] | None = None


class TransportResult(BaseModel):
    """Failure signal handed over by the upload transport.

    Either a response (``status`` set, optionally with ``response_json``) or a
    bare ``errors`` list when no HTTP exchange is available.
    """

    model_config = ConfigDict(populate_by_name=True)

    status: int | None = None
    response_json: TransportResponseBody | None = Field(default=None, alias="responseJSON")
    attempted_file_name: str | None = Field(default=None, alias="attemptedFileName")
    errors: list[str] | None = None


class TransportFailureKind(str, Enum):
    NO_RESPONSE = "no_response"
    TOO_LARGE = "too_large"
    SERVER_REJECTED = "server_rejected"
    SERVER_REJECTED_LIST = "server_rejected_list"
    UNKNOWN = "unknown"


class TransportFailure(BaseModel):
    """A transport failure bucketed by what the user should be told."""

    model_config = ConfigDict(frozen=True)

    kind: TransportFailureKind
    media_type: MediaType | None = None
    max_size_kb: int | None = None
    messages: list[str] = Field(default_factory=list)
