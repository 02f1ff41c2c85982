import pytest

from content_safety.sanitizer import get_configured_policy


@pytest.fixture(autouse=True)
def fresh_configured_policy():
    # get_configured_policy caches the environment-derived policy per process.
    get_configured_policy.cache_clear()
    yield
    get_configured_policy.cache_clear()
