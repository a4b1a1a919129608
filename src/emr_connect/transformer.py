"""
Resource Transformer

Converts between the canonical FHIR R4 resources applications pass in and
the session-shape resources handed to the underlying session.
"""

import copy
from collections.abc import Mapping
from typing import Any, Dict, Optional, Type, TypeVar

import structlog
from pydantic import BaseModel, Field, ValidationError

from emr_connect.exceptions import MalformedResourceError

logger = structlog.get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class SessionResource(BaseModel):
    """
    A FHIR resource in the shape the session transport expects.

    The resourceType discriminant is lifted out; every other element is
    kept untouched in elements.
    """
    resource_type: str = Field(min_length=1)
    elements: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping) -> "SessionResource":
        """Create from a resource dictionary."""
        return cls(
            resource_type=data["resourceType"],
            elements={k: copy.deepcopy(v) for k, v in data.items() if k != "resourceType"},
        )

    def has(self, element: str) -> bool:
        """Check if the resource declares an element."""
        return element == "resourceType" or element in self.elements

    def get(self, element: str, default: Any = None) -> Any:
        if element == "resourceType":
            return self.resource_type
        return self.elements.get(element, default)

    def merge(self, fragment: Dict[str, Any]) -> "SessionResource":
        """Return a copy with fragment elements the resource does not declare."""
        additions = {k: v for k, v in fragment.items() if not self.has(k)}
        if not additions:
            return self
        return SessionResource.from_dict({**self.to_dict(), **additions})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {"resourceType": self.resource_type, **copy.deepcopy(self.elements)}


def to_session_shape(resource: Mapping) -> SessionResource:
    """
    Convert a canonical resource to the session shape.

    Raises:
        MalformedResourceError: If the resource has no resourceType
    """
    if isinstance(resource, SessionResource):
        return resource
    if not isinstance(resource, Mapping):
        raise MalformedResourceError(
            f"Expected a FHIR resource mapping, got {type(resource).__name__}"
        )
    if not isinstance(resource.get("resourceType"), str) or not resource["resourceType"]:
        raise MalformedResourceError("Resource must have a resourceType")
    try:
        return SessionResource.from_dict(resource)
    except ValidationError as e:
        raise MalformedResourceError(f"Resource could not be converted: {e}") from e


def to_canonical(resource: Any, model: Optional[Type[T]] = None) -> Any:
    """
    Convert a session-shape resource back to the canonical shape.

    Args:
        resource: A SessionResource or a resource mapping returned by the session
        model: Optional pydantic model class (e.g. a fhir.resources class)
            to validate the result into

    Returns:
        The resource as a dict, or as an instance of model

    Raises:
        MalformedResourceError: If the resource has no resourceType or
            does not validate against model
    """
    data = to_session_shape(resource).to_dict()

    if model is None:
        return data

    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning(
            "Resource failed typed validation",
            resource_type=data["resourceType"],
            model=model.__name__,
        )
        raise MalformedResourceError(
            f"{data['resourceType']} does not validate as {model.__name__}"
        ) from e
