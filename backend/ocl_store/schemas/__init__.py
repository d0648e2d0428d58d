"""Shared enums for the OCL CodeSystem store."""

from ocl_store.schemas.base import PublicAccess, ResourceType

__all__ = [
    "PublicAccess",
    "ResourceType",
]
