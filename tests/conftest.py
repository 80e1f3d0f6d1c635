import sys
from pathlib import Path

import pytest

# Ensure `src` is on sys.path for tests when not installed editable.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from zone_mapper.config import Settings  # noqa: E402
from zone_mapper.mapper import build_mapper  # noqa: E402
from zone_mapper.mapping.zones import resolve_zone  # noqa: E402


@pytest.fixture
def central():
    return resolve_zone("America/Chicago")


@pytest.fixture
def settings():
    return Settings(LOCAL_TIMEZONE="America/Chicago", PASSTHROUGH_FIELDS="appointment_time")


@pytest.fixture
def mapper(settings):
    return build_mapper(settings)
