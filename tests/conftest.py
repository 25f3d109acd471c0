import pytest

from config import Settings
from tests.helpers import FakeStore, make_item


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def pen():
    return make_item(1, "Pen", "1.5", 10)


@pytest.fixture
def store(pen):
    return FakeStore([pen])


@pytest.fixture
def settings():
    return Settings(store_url="http://store.test", store_key="test-key", store_table="MyinventoryDB")
