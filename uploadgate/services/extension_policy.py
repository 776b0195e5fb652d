"""Evaluates the site's authorized-extension settings.

The settings carry two ``|``-delimited lists: extensions any user may upload
and extensions only staff may upload. Either list may contain ``*``, which
authorizes every extension. Staff extensions only ever add to the global list.

Compiling a list normalizes its tokens and builds the suffix matchers. A
``SiteUploadSettings`` snapshot is immutable, so the compiled policy is cached
per snapshot and shared by every call that uses it.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache

from uploadgate.core.config import SiteUploadSettings

logger = logging.getLogger(__name__)

WILDCARD = "*"

# Matches anywhere in a token, so "jpeg" and "heic" qualify.
IMAGE_EXTENSIONS_PATTERN = re.compile(r"(png|jpe?g|gif|svg|ico|heic|heif)", re.IGNORECASE)

# Shown when every extension is authorized and only images are wanted.
ALL_IMAGE_EXTENSIONS: tuple[str, ...] = ("png", "jpg", "jpeg", "gif", "svg", "ico", "heic", "heif")

_STRIP_PATTERN = re.compile(r"[\s.]+")


def normalize(raw: str | None) -> tuple[str, ...]:
    """Splits an extension list into lowercase tokens.

    Whitespace and dots are removed, tokens containing ``*`` are dropped, and
    empty or repeated tokens are skipped. Order of first appearance is kept.
    """
    if not raw:
        return ()
    cleaned = _STRIP_PATTERN.sub("", raw.lower())
    tokens: list[str] = []
    for token in cleaned.split("|"):
        if not token or WILDCARD in token or token in tokens:
            continue
        tokens.append(token)
    return tuple(tokens)


def _suffix_matcher(tokens: tuple[str, ...]) -> re.Pattern[str] | None:
    if not tokens:
        return None
    alternatives = "|".join(re.escape(token) for token in tokens)
    return re.compile(rf"\.({alternatives})$", re.IGNORECASE)


def _matches(matcher: re.Pattern[str] | None, name: str) -> bool:
    return matcher is not None and matcher.search(name) is not None


@dataclass(frozen=True)
class ExtensionList:
    """One compiled extension list."""

    tokens: tuple[str, ...]
    image_tokens: tuple[str, ...]
    allows_all: bool
    matcher: re.Pattern[str] | None
    image_matcher: re.Pattern[str] | None

    @classmethod
    def compile(cls, raw: str | None) -> "ExtensionList":
        tokens = normalize(raw)
        image_tokens = tuple(token for token in tokens if IMAGE_EXTENSIONS_PATTERN.search(token))
        return cls(
            tokens=tokens,
            image_tokens=image_tokens,
            allows_all=WILDCARD in (raw or ""),
            matcher=_suffix_matcher(tokens),
            image_matcher=_suffix_matcher(image_tokens),
        )


@dataclass(frozen=True)
class ExtensionPolicy:
    """The compiled global and staff-only lists of one settings snapshot."""

    global_list: ExtensionList
    staff_list: ExtensionList
    # Non-empty entries of the raw global list, "*" included.
    global_entry_count: int

    @classmethod
    def from_settings(cls, site: SiteUploadSettings) -> "ExtensionPolicy":
        return _compile(site)

    def authorizes_all(self, staff: bool) -> bool:
        return self.global_list.allows_all or (staff and self.staff_list.allows_all)

    def authorizes_any(self, staff: bool) -> bool:
        return self.authorizes_all(staff) or self.global_entry_count > 0

    def authorizes_any_image(self, staff: bool) -> bool:
        return self.authorizes_all(staff) or len(self.image_extensions(staff)) > 0

    def allowed_extensions(self, staff: bool) -> list[str]:
        """Global tokens, then staff tokens for staff, without repeats."""
        exts = list(self.global_list.tokens)
        if staff:
            exts.extend(token for token in self.staff_list.tokens if token not in exts)
        return exts

    def image_extensions(self, staff: bool) -> list[str]:
        exts = list(self.global_list.image_tokens)
        if staff:
            exts.extend(token for token in self.staff_list.image_tokens if token not in exts)
        return exts

    def authorized_extensions(self, staff: bool) -> str:
        return ", ".join(self.allowed_extensions(staff))

    def authorized_image_extensions(self, staff: bool) -> str:
        if self.authorizes_all(staff):
            return ", ".join(ALL_IMAGE_EXTENSIONS)
        return ", ".join(self.image_extensions(staff))

    def is_authorized_file(self, name: str, staff: bool) -> bool:
        """Matches the suffix of *name* against the literal extension tokens.

        Wildcards play no part here; callers check ``authorizes_all`` first.
        """
        if staff and _matches(self.staff_list.matcher, name):
            return True
        return _matches(self.global_list.matcher, name)

    def is_authorized_image(self, name: str, staff: bool) -> bool:
        if staff and _matches(self.staff_list.image_matcher, name):
            return True
        return _matches(self.global_list.image_matcher, name)

    def allows_images(self, staff: bool) -> bool:
        return self.authorizes_all(staff) or IMAGE_EXTENSIONS_PATTERN.search(self.authorized_extensions(staff)) is not None

    def allows_attachments(self, staff: bool) -> bool:
        return self.authorizes_all(staff) or len(self.allowed_extensions(staff)) > len(self.image_extensions(staff))

    def upload_icon(self, staff: bool) -> str:
        return "upload" if self.allows_attachments(staff) else "far-image"


@lru_cache(maxsize=32)
def _compile(site: SiteUploadSettings) -> ExtensionPolicy:
    policy = ExtensionPolicy(
        global_list=ExtensionList.compile(site.authorized_extensions),
        staff_list=ExtensionList.compile(site.authorized_extensions_for_staff),
        global_entry_count=len([entry for entry in (site.authorized_extensions or "").split("|") if entry]),
    )
    logger.debug(
        "Compiled extension policy: global=%s staff=%s",
        policy.global_list.tokens,
        policy.staff_list.tokens,
    )
    return policy


# Module-level helpers taking (staff, settings), for UI surfaces that only hold the settings.


def authorizes_all(staff: bool, site: SiteUploadSettings) -> bool:
    return ExtensionPolicy.from_settings(site).authorizes_all(staff)


def authorizes_any(staff: bool, site: SiteUploadSettings) -> bool:
    return ExtensionPolicy.from_settings(site).authorizes_any(staff)


def authorizes_any_image(staff: bool, site: SiteUploadSettings) -> bool:
    return ExtensionPolicy.from_settings(site).authorizes_any_image(staff)


def allowed_extensions(staff: bool, site: SiteUploadSettings) -> list[str]:
    return ExtensionPolicy.from_settings(site).allowed_extensions(staff)


def authorized_extensions(staff: bool, site: SiteUploadSettings) -> str:
    return ExtensionPolicy.from_settings(site).authorized_extensions(staff)


def authorized_image_extensions(staff: bool, site: SiteUploadSettings) -> str:
    return ExtensionPolicy.from_settings(site).authorized_image_extensions(staff)


def is_authorized_file(name: str, staff: bool, site: SiteUploadSettings) -> bool:
    return ExtensionPolicy.from_settings(site).is_authorized_file(name, staff)


def is_authorized_image(name: str, staff: bool, site: SiteUploadSettings) -> bool:
    return ExtensionPolicy.from_settings(site).is_authorized_image(name, staff)


def allows_images(staff: bool, site: SiteUploadSettings) -> bool:
    return ExtensionPolicy.from_settings(site).allows_images(staff)


def allows_attachments(staff: bool, site: SiteUploadSettings) -> bool:
    return ExtensionPolicy.from_settings(site).allows_attachments(staff)


def upload_icon(staff: bool, site: SiteUploadSettings) -> str:
    return ExtensionPolicy.from_settings(site).upload_icon(staff)
