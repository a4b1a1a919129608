"""In-memory stand-ins for the SMART client session and launcher."""

from datetime import datetime, timezone
from types import SimpleNamespace

from emr_connect import ContextHydrator, EMRClient, get_profile

CERNER_URL = "https://fhir-ehr-code.cerner.com/r4/ec2458f2-1e24-41c8-b71b-0e701af7583d"
EPIC_URL = "https://fhir.epic.com/interconnect-fhir-oauth/api/FHIR/R4"
ENCOUNTER = {
    "resourceType": "Encounter",
    "id": "enc-1",
    "status": "in-progress",
    "class": {"system": "http://terminology.hl7.org/CodeSystem/v3-ActCode", "code": "AMB"},
}
FIXED_NOW = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


class FakeEntity:
    """Patient / encounter / user with an awaitable id, like the SMART client."""

    def __init__(self, id_value=None, resource=None, deferred=True, read_error=None):
        self._id = id_value
        self._resource = resource
        self._deferred = deferred
        self._read_error = read_error
        self.reads = 0

    @property
    def id(self):
        if not self._deferred:
            return self._id

        async def _resolve():
            return self._id

        return _resolve()

    async def read(self):
        self.reads += 1
        if self._read_error:
            raise self._read_error
        return self._resource


class FakeSession:
    """Session double recording every create and request."""

    def __init__(
        self,
        server_url=CERNER_URL,
        patient=None,
        encounter=None,
        user=None,
        create_result=None,
        create_error=None,
        request_result=None,
        request_error=None,
    ):
        self.state = SimpleNamespace(server_url=server_url)
        self.patient = patient or FakeEntity("pat-1", {"resourceType": "Patient", "id": "pat-1"})
        self.encounter = encounter or FakeEntity("enc-1", ENCOUNTER)
        self.user = user or FakeEntity("dr-1", {"resourceType": "Practitioner", "id": "dr-1"})
        self.create_result = create_result
        self.create_error = create_error
        self.request_result = request_result
        self.request_error = request_error
        self.created = []
        self.requests = []

    async def create(self, resource, options):
        self.created.append((resource, options))
        if self.create_error:
            raise self.create_error
        if self.create_result is not None:
            return self.create_result
        return {**resource, "id": "new-1"}

    async def request(self, options):
        self.requests.append(options)
        if self.request_error:
            raise self.request_error
        return self.request_result


class FakeLauncher:
    def __init__(self, session):
        self.session = session
        self.ready_calls = 0

    async def ready(self):
        self.ready_calls += 1
        return self.session


def fixed_clock():
    return FIXED_NOW


def make_client(session, vendor):
    client = EMRClient(session, get_profile(vendor))
    client.hydrator = ContextHydrator(session, clock=fixed_clock)
    return client
