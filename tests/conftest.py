import pytest

from emr_connect.vendors import VendorTag

from tests.fakes import EPIC_URL, FakeSession, make_client


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def epic_session():
    return FakeSession(server_url=EPIC_URL)


@pytest.fixture
def cerner_client(session):
    return make_client(session, VendorTag.CERNER)


@pytest.fixture
def epic_client(epic_session):
    return make_client(epic_session, VendorTag.EPIC)
