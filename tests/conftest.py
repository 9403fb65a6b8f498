import pytest

from tests.helpers import make_page


@pytest.fixture
def dummy_file():
    return make_page()
