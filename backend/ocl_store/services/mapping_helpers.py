"""Helpers shared by the CodeSystem conversion layer.

These operate on plain FHIR JSON dicts, e.g. a concept property:

    {"code": "conceptclass", "valueString": "Diagnosis"}
    {"code": "inactive", "valueBoolean": true}
"""

import json
from typing import Any

from ocl_store.models import Source

NA = "n/a"
EMPTY_JSON = "{}"
RESOURCE_TYPE = "resourceType"
IDENTIFIER = "identifier"
CONTACT = "contact"
JURISDICTION = "jurisdiction"


def _find_property(properties: list[dict[str, Any]], code: str) -> dict[str, Any] | None:
    return next((p for p in properties if p.get("code") == code), None)


def get_string_property(properties: list[dict[str, Any]], code: str) -> str:
    """Return the valueString of the property with this code, or ``n/a``."""
    component = _find_property(properties, code)
    if component is not None:
        value = component.get("valueString")
        if value is not None and value.strip():
            return value
    return NA


def get_boolean_property(properties: list[dict[str, Any]], code: str) -> bool:
    """Return the valueBoolean of the property with this code, False when absent."""
    component = _find_property(properties, code)
    if component is not None and component.get("valueBoolean") is not None:
        return bool(component["valueBoolean"])
    return False


def to_json_string(resource: dict[str, Any], key: str) -> str:
    """Serialize one sub-structure of a resource as compact JSON.

    Empty or missing values serialize to ``{}``.
    """
    fields = {k: v for k, v in resource.items() if k != RESOURCE_TYPE}
    value = fields.get(key)
    if isinstance(value, (list, dict)) and value:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return EMPTY_JSON


def add_json_strings(code_system: dict[str, Any], source: Source) -> None:
    """Copy identifier, contact and jurisdiction of a CodeSystem onto a source.

    The identifier is always set; contact and jurisdiction only when the
    CodeSystem carries them.
    """
    source.identifier = to_json_string(code_system, IDENTIFIER)
    if code_system.get(CONTACT):
        source.contact = to_json_string(code_system, CONTACT)
    if code_system.get(JURISDICTION):
        source.jurisdiction = to_json_string(code_system, JURISDICTION)
