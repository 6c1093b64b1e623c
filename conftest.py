import pytest

from identity_server.tests.util import create_test_app


@pytest.fixture()
def app():
    return create_test_app()


@pytest.fixture()
def request_context(app):
    yield app.test_request_context()
