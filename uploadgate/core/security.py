"""API key protection for the upload policy endpoints.

The key is sent in the ``X-API-Key`` header. The upload router declares
``verify_api_key`` once for all of its routes; ``/health`` stays open.
"""

import logging
import secrets

from fastapi import Depends
from fastapi import HTTPException
from fastapi.security import APIKeyHeader

from uploadgate.core.config import settings

logger = logging.getLogger(__name__)

API_KEY_HEADER_NAME = "X-API-Key"

api_key_header = APIKeyHeader(name=API_KEY_HEADER_NAME)


def api_key_matches(candidate: str, expected: str | None) -> bool:
    """Compares keys in constant time; an unconfigured server matches nothing."""
    if not expected:
        return False
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


async def verify_api_key(key: str = Depends(api_key_header)) -> bool:
    """Checks the request's key against the configured one.

    Raises:
        HTTPException: 403 when the key does not match or no key is configured.
    """
    if not settings.api_key:
        logger.critical(
            "No API_KEY is configured on the server; every upload policy request will be denied."
        )

    if not api_key_matches(key, settings.api_key):
        logger.warning("Rejected upload policy request with an invalid API key")
        raise HTTPException(status_code=403, detail="Invalid API Key")
    return True
