import pytest

from tests.fixtures import FakeDatabase


@pytest.fixture
def fake_db():
    return FakeDatabase()
