from pathlib import Path

import pytest

from opsctl.config.defaults import DEFAULT_PROFILES
from opsctl.models.records import RecordType, TypeProfile


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def system_profile() -> TypeProfile:
    return TypeProfile(
        record_type=RecordType.SYSTEM,
        fields=("name", "status"),
        lengths={"name": 8, "status": 6},
    )


@pytest.fixture
def default_profiles() -> dict[RecordType, TypeProfile]:
    return dict(DEFAULT_PROFILES)
