"""Tests for principal, source, concept and link-table models."""

import pytest

from ocl_store.core.database import Base
from ocl_store.models import (
    AuthToken,
    Concept,
    ConceptsDescription,
    ConceptsName,
    ConceptsSource,
    LocalizedText,
    Organization,
    Source,
    UserProfile,
    UserProfilesOrganization,
)


class TestTableNames:
    """Models map onto the OCL table names."""

    @pytest.mark.parametrize(
        "model,tablename",
        [
            (Organization, "organizations"),
            (UserProfile, "user_profiles"),
            (AuthToken, "authtoken_token"),
            (UserProfilesOrganization, "user_profiles_organizations"),
            (Source, "sources"),
            (Concept, "concepts"),
            (LocalizedText, "localized_texts"),
            (ConceptsName, "concepts_names"),
            (ConceptsDescription, "concepts_descriptions"),
            (ConceptsSource, "concepts_sources"),
        ],
    )
    def test_tablename(self, model, tablename: str) -> None:
        assert issubclass(model, Base)
        assert model.__tablename__ == tablename


class TestConceptModel:
    """Test Concept model class."""

    def test_concept_has_required_columns(self) -> None:
        columns = Concept.__table__.c
        required_columns = [
            "id", "mnemonic", "version", "name", "full_name", "default_locale",
            "concept_class", "datatype", "is_active", "released", "retired",
            "is_latest_version", "comment", "extras", "created_by_id",
            "updated_by_id", "parent_id", "created_at", "updated_at",
        ]
        for col in required_columns:
            assert col in columns, f"Missing column: {col}"

    def test_timestamps_have_no_default(self) -> None:
        """Concept timestamps are always copied from the parent source."""
        assert Concept.__table__.c.created_at.default is None
        assert Concept.__table__.c.updated_at.default is None

    def test_parent_is_a_source(self) -> None:
        fk = next(iter(Concept.__table__.c.parent_id.foreign_keys))
        assert fk.column.table.name == "sources"


class TestLocalizedTextModel:
    def test_has_required_columns(self) -> None:
        columns = LocalizedText.__table__.c
        for col in ["name", "type", "locale", "locale_preferred", "created_at"]:
            assert col in columns, f"Missing column: {col}"

    def test_repr(self) -> None:
        text = LocalizedText(id=1, name="Fever", locale="en")
        assert repr(text) == "<LocalizedText(id=1, locale='en', name='Fever')>"


class TestLinkTables:
    """Link tables hold only their two foreign keys besides the id."""

    @pytest.mark.parametrize(
        "model,columns",
        [
            (ConceptsName, {"id", "concept_id", "localizedtext_id"}),
            (ConceptsDescription, {"id", "concept_id", "localizedtext_id"}),
            (ConceptsSource, {"id", "concept_id", "source_id"}),
        ],
    )
    def test_columns(self, model, columns: set[str]) -> None:
        assert set(model.__table__.c.keys()) == columns


class TestOwnerModels:
    def test_username_is_unique(self) -> None:
        assert UserProfile.__table__.c.username.unique is True

    def test_organization_mnemonic_is_unique(self) -> None:
        assert Organization.__table__.c.mnemonic.unique is True

    def test_token_key_is_unique_and_indexed(self) -> None:
        key = AuthToken.__table__.c.key
        assert key.unique is True
        assert key.index is True

    def test_source_identity_is_not_a_constraint(self) -> None:
        """Duplicate detection is done by lookup before the write."""
        assert Source.__table__.c.mnemonic.unique is not True
        assert Source.__table__.c.canonical_url.unique is not True
