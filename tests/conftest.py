import pytest

from tests.helpers import RADA_TAGS, DummyStore, make_node


@pytest.fixture
def rada_node():
    return make_node(dict(RADA_TAGS))


@pytest.fixture
def store():
    return DummyStore()
