"""Base enums for the OCL CodeSystem store."""

from enum import Enum


class ResourceType(str, Enum):
    """FHIR resource types the write path knows how to check."""

    CODESYSTEM = "CodeSystem"


class PublicAccess(str, Enum):
    """OCL public access levels."""

    VIEW = "View"
    EDIT = "Edit"
    NONE = "None"
