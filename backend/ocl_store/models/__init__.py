"""SQLAlchemy ORM models for the OCL CodeSystem store.

All models inherit from Base which provides:
- id: store-generated integer primary key

Models:
- Organization, UserProfile, AuthToken, UserProfilesOrganization (principals)
- Source (code systems)
- Concept, LocalizedText and the concepts_names / concepts_descriptions /
  concepts_sources link tables
"""

from ocl_store.core.database import Base
from ocl_store.models.concept import (
    Concept,
    ConceptsDescription,
    ConceptsName,
    ConceptsSource,
    LocalizedText,
)
from ocl_store.models.owner import AuthToken, Organization, UserProfile, UserProfilesOrganization
from ocl_store.models.source import Source

__all__ = [
    "Base",
    "Organization",
    "UserProfile",
    "AuthToken",
    "UserProfilesOrganization",
    "Source",
    "Concept",
    "LocalizedText",
    "ConceptsName",
    "ConceptsDescription",
    "ConceptsSource",
]
