"""
Endpoint Registry

Validated token, FHIR R4 and authorize endpoints of an EMR vendor.
"""

from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from emr_connect.exceptions import InvalidEndpointError, MissingEndpointError


class EndpointSet(BaseModel):
    """
    Endpoints of one EMR vendor.

    Attributes:
        token: OAuth2 token endpoint
        r4: FHIR R4 base URL, always ending with a slash
        auth: OAuth2 authorize endpoint
    """
    model_config = ConfigDict(frozen=True)

    token: str
    r4: str
    auth: str

    @field_validator("token", "r4", "auth")
    @classmethod
    def _must_be_http_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Not an absolute http(s) URL: {value}")
        return value

    @field_validator("r4")
    @classmethod
    def _trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else f"{value}/"


def construct_endpoints(
    token: Optional[str],
    r4: Optional[str],
    authorize: Optional[str],
) -> EndpointSet:
    """
    Build an endpoint set, failing on the first undefined endpoint.

    Raises:
        MissingEndpointError: If token, r4 or authorize is not defined
        InvalidEndpointError: If an endpoint is not an absolute http(s) URL
    """
    if not token:
        raise MissingEndpointError("token")
    if not r4:
        raise MissingEndpointError("r4")
    if not authorize:
        raise MissingEndpointError("auth")
    try:
        return EndpointSet(token=token, r4=r4, auth=authorize)
    except ValidationError as e:
        loc = e.errors()[0].get("loc") or ("endpoint",)
        raise InvalidEndpointError(str(loc[0])) from e
