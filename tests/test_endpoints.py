import pytest
from pydantic import ValidationError

from emr_connect import (
    ConfigurationError,
    InvalidEndpointError,
    MissingEndpointError,
    UnsupportedVendorError,
    VendorProfile,
    VendorTag,
    construct_endpoints,
    endpoints_for,
    resolve_vendor,
)
from emr_connect.vendors import resolve_vendor_from_url

from tests.fakes import FakeSession

CERNER_TENANT = "ec2458f2-1e24-41c8-b71b-0e701af7583d"


@pytest.mark.parametrize("vendor", [VendorTag.SMART, VendorTag.NONE])
def test_no_endpoints_for_smart_or_none(vendor):
    with pytest.raises(UnsupportedVendorError) as exc_info:
        endpoints_for(vendor)
    assert exc_info.value.vendor == vendor


def test_epic_endpoints_are_stable():
    first = endpoints_for(VendorTag.EPIC)
    second = endpoints_for(VendorTag.EPIC)
    assert first == second
    assert first.token == "https://fhir.epic.com/interconnect-fhir-oauth/oauth2/token"
    assert first.r4 == "https://fhir.epic.com/interconnect-fhir-oauth/api/FHIR/R4/"
    assert first.auth == "https://fhir.epic.com/interconnect-fhir-oauth/oauth2/authorize"


def test_cerner_scenario():
    vendor = resolve_vendor(FakeSession(server_url="https://fhir-ehr-code.cerner.com/r4/abc"))
    assert vendor == VendorTag.CERNER

    endpoints = endpoints_for(vendor)
    assert endpoints.token.endswith("/token")
    assert endpoints.r4 == f"https://fhir-ehr-code.cerner.com/r4/{CERNER_TENANT}/"
    assert endpoints.auth.endswith("/authorize")
    assert CERNER_TENANT in endpoints.token


@pytest.mark.parametrize(
    "vendor",
    [VendorTag.EPIC, VendorTag.CERNER, VendorTag.ECW, VendorTag.ATHENA, VendorTag.ATHENAPRACTICE],
)
def test_vendor_endpoints_resolve_back_to_vendor(vendor):
    endpoints = endpoints_for(vendor)
    assert resolve_vendor_from_url(endpoints.r4) == vendor
    assert endpoints.r4.endswith("/")


@pytest.mark.parametrize(
    "token,r4,authorize,missing",
    [
        (None, "https://a/r4", "https://a/auth", "token"),
        ("https://a/token", None, "https://a/auth", "r4"),
        ("https://a/token", "https://a/r4", None, "auth"),
        ("", "https://a/r4", "https://a/auth", "token"),
    ],
)
def test_construct_endpoints_names_missing_field(token, r4, authorize, missing):
    with pytest.raises(MissingEndpointError) as exc_info:
        construct_endpoints(token, r4, authorize)
    assert exc_info.value.field == missing
    assert missing in str(exc_info.value)


def test_construct_endpoints_adds_trailing_slash():
    endpoints = construct_endpoints("https://a/token", "https://a/r4", "https://a/auth")
    assert endpoints.r4 == "https://a/r4/"


def test_construct_endpoints_rejects_relative_urls():
    with pytest.raises(InvalidEndpointError) as exc_info:
        construct_endpoints("/token", "https://a/r4", "https://a/auth")
    assert exc_info.value.field == "token"
    assert isinstance(exc_info.value.__cause__, ValidationError)


@pytest.mark.parametrize(
    "token,r4,authorize,invalid",
    [
        ("not-a-url", "https://a/r4", "https://a/auth", "token"),
        ("https://a/token", "ftp://a/r4", "https://a/auth", "r4"),
        ("https://a/token", "https://a/r4", "a/auth", "auth"),
    ],
)
def test_invalid_endpoint_is_a_configuration_error(token, r4, authorize, invalid):
    with pytest.raises(ConfigurationError) as exc_info:
        construct_endpoints(token, r4, authorize)
    assert isinstance(exc_info.value, InvalidEndpointError)
    assert exc_info.value.field == invalid


def test_profile_without_endpoints_fails_when_built():
    with pytest.raises(MissingEndpointError) as exc_info:
        VendorProfile(
            vendor=VendorTag.EPIC,
            token_endpoint=None,
            r4_endpoint=None,
            authorize_endpoint=None,
        )
    assert exc_info.value.field == "token"


def test_profile_with_partial_endpoints_names_missing_one():
    with pytest.raises(MissingEndpointError) as exc_info:
        VendorProfile(
            vendor=VendorTag.ECW,
            token_endpoint="https://a/token",
            r4_endpoint="https://a/r4",
        )
    assert exc_info.value.field == "auth"


def test_profile_with_invalid_endpoint_fails_when_built():
    with pytest.raises(InvalidEndpointError):
        VendorProfile(
            vendor=VendorTag.ATHENA,
            token_endpoint="https://a/token",
            r4_endpoint="r4",
            authorize_endpoint="https://a/auth",
        )


def test_profile_carries_validated_endpoints():
    profile = VendorProfile(
        vendor=VendorTag.EPIC,
        token_endpoint="https://a/token",
        r4_endpoint="https://a/r4",
        authorize_endpoint="https://a/auth",
    )
    assert profile.endpoints.r4 == "https://a/r4/"


@pytest.mark.parametrize("vendor", [["epic"], {"vendor": "epic"}, None, "unknown"])
def test_endpoints_for_rejects_non_vendor_input(vendor):
    with pytest.raises(UnsupportedVendorError):
        endpoints_for(vendor)


def test_endpoint_set_is_immutable():
    endpoints = endpoints_for(VendorTag.CERNER)
    with pytest.raises(ValidationError):
        endpoints.token = "https://elsewhere/token"
