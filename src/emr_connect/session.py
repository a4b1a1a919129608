"""
Session Protocols

Narrow interfaces to the external SMART/FHIR client library. The library
owns the OAuth handshake and the transport; EMR Connect only references
the session it hands back.
"""

import inspect
from typing import Any, Awaitable, Dict, Protocol, Union

import structlog

from emr_connect.exceptions import MissingIdentifierError

logger = structlog.get_logger(__name__)


class DeferredIdentifier(Protocol):
    """Session entity (patient, encounter, user) with a lazily resolved id."""

    @property
    def id(self) -> Union[str, None, Awaitable[Union[str, None]]]: ...

    async def read(self) -> Dict[str, Any]: ...


class SessionState(Protocol):
    """Launch state of a session."""

    server_url: str


class SessionHandle(Protocol):
    """An authenticated clinical session for one EMR server."""

    patient: DeferredIdentifier
    encounter: DeferredIdentifier
    user: DeferredIdentifier
    state: SessionState

    async def create(self, resource: Dict[str, Any], options: Dict[str, Any]) -> Dict[str, Any]: ...

    async def request(self, options: Dict[str, Any]) -> Dict[str, Any]: ...


class Launcher(Protocol):
    """Completes the SMART launch and yields the ready session."""

    async def ready(self) -> SessionHandle: ...


async def resolve_identifier(deferred: DeferredIdentifier, name: str) -> str:
    """
    Resolve the id of a session entity.

    Args:
        deferred: The session's patient, encounter or user
        name: Identifier name used in the error

    Returns:
        The resolved id

    Raises:
        MissingIdentifierError: If the id resolves to an empty value
    """
    value = getattr(deferred, "id", None) if deferred is not None else None
    if inspect.isawaitable(value):
        value = await value
    if not value:
        logger.warning("Session identifier missing", identifier=name)
        raise MissingIdentifierError(name)
    return str(value)
