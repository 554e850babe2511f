import pytest

from fincalc.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached per process; start and end every test clean."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
