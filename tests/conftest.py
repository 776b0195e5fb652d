import pytest

from uploadgate.core.config import SiteUploadSettings
from uploadgate.models.upload_models import UploadCandidate
from uploadgate.models.upload_models import UserContext


# Fixture factory for site settings snapshots; anything not given keeps its default
@pytest.fixture
def make_site():
    def _make_site(**overrides) -> SiteUploadSettings:
        return SiteUploadSettings(**overrides)

    return _make_site


@pytest.fixture
def candidate():
    def _candidate(name: str | None = "photo.png", **fields) -> UploadCandidate:
        return UploadCandidate(name=name, **fields)

    return _candidate


@pytest.fixture
def regular_user() -> UserContext:
    return UserContext(staff=False, trust_level=1)


@pytest.fixture
def staff_user() -> UserContext:
    return UserContext(staff=True, trust_level=4)


@pytest.fixture
def new_user() -> UserContext:
    return UserContext(staff=False, trust_level=0)
