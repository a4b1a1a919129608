"""
Typed FHIR R4B Models

Maps resource types to their fhir.resources classes for callers that
want validated models instead of plain dicts.
"""

from collections.abc import Mapping
from typing import Any, Optional, Type

from fhir.resources.R4B.condition import Condition
from fhir.resources.R4B.diagnosticreport import DiagnosticReport
from fhir.resources.R4B.documentreference import DocumentReference
from fhir.resources.R4B.encounter import Encounter
from fhir.resources.R4B.medicationrequest import MedicationRequest
from fhir.resources.R4B.observation import Observation
from fhir.resources.R4B.patient import Patient
from fhir.resources.R4B.practitioner import Practitioner
from fhir.resources.R4B.procedure import Procedure

from emr_connect.exceptions import MalformedResourceError
from emr_connect.transformer import to_canonical

RESOURCE_CLASSES = {
    "Patient": Patient,
    "Practitioner": Practitioner,
    "Encounter": Encounter,
    "Observation": Observation,
    "Condition": Condition,
    "Procedure": Procedure,
    "MedicationRequest": MedicationRequest,
    "DiagnosticReport": DiagnosticReport,
    "DocumentReference": DocumentReference,
}


def model_for(resource_type: str) -> Optional[Type]:
    """Get the fhir.resources class for a resource type, None if unmapped."""
    return RESOURCE_CLASSES.get(resource_type)


def to_typed(resource: Mapping) -> Any:
    """
    Validate a resource into its fhir.resources model.

    Raises:
        MalformedResourceError: If the type is unmapped or the resource is invalid
    """
    resource_type = resource.get("resourceType") if isinstance(resource, Mapping) else None
    model = model_for(resource_type) if isinstance(resource_type, str) else None
    if model is None:
        raise MalformedResourceError(f"No typed model for resource type {resource_type}")
    return to_canonical(resource, model=model)
