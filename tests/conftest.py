# tests/conftest.py

import pytest

import ephemtime
from ephemtime.config import Settings
from ephemtime.reference.deltat import DeltaTEngine


@pytest.fixture(autouse=True)
def builtin_delta_t():
    """Process-wide engine on the built-in table only, independent of the environment."""
    ephemtime.set_settings(Settings())
    eng = DeltaTEngine(source=[])
    ephemtime.set_delta_t_engine(eng)
    yield eng
    ephemtime.set_delta_t_engine(None)
    ephemtime.set_settings(None)
