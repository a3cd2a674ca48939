import pytest

from healthfair_backend.core.cache import reference_cache


@pytest.fixture(autouse=True)
def _clear_reference_cache():
    """Reference data lives in the process-local cache; never share it between tests."""
    reference_cache.clear()
    yield
    reference_cache.clear()
