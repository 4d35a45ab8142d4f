"""Tests for field session lifecycle and derived views."""

import pytest

from schemadraft import (
    NEW_FIELD,
    DisplayConfig,
    FieldSession,
    InterfaceConfig,
    initialize,
    teardown,
)
from schemadraft.exceptions import (
    CollectionNotFoundError,
    FieldNotFoundError,
    InvalidCategoryError,
    SchemaDraftError,
    SessionClosedError,
)

INTERFACES = [
    InterfaceConfig(id="input", name="Input", types=["string", "integer"]),
    InterfaceConfig(id="toggle", name="Toggle", types=["boolean"]),
    InterfaceConfig(id="datetime", name="Datetime", types=["dateTime", "timestamp"]),
    InterfaceConfig(id="datetime-raw", name="Raw", types=["dateTime"], system=True),
    InterfaceConfig(
        id="list-m2m", name="Many to Many", types=["alias"], groups=["m2m", "files"]
    ),
]

DISPLAYS = [
    DisplayConfig(id="raw", name="Raw", types=["string", "integer", "boolean"]),
    DisplayConfig(id="boolean", name="Boolean", types=["boolean"]),
    DisplayConfig(id="related-values", name="Related Values", types=["alias"]),
]


class TestLoadExistingField:
    """Tests for opening a session on a stored field."""

    def test_loads_field_and_relations(self, open_session):
        session = open_session("posts", "m2o", field="author")

        assert session.is_existing
        assert session.state.field.field == "author"
        assert session.state.field.type == "uuid"
        [relation] = session.state.relations
        assert relation.related_collection == "users"
        assert relation.meta.one_field == "posts"

    def test_round_trip_proposes_nothing(self, open_session):
        session = open_session("posts", "m2o", field="author")
        session.settle()

        state = session.state
        assert state.new_collections == []
        assert state.new_fields == []
        assert state.new_rows == {}
        assert session.generation_info == []
        assert session.validate() == []

    def test_editing_loaded_m2o_proposes_nothing(self, open_session):
        session = open_session("posts", "m2o", field="author")

        session.set("relations.0.related_collection", "articles")
        session.settle()

        assert session.state.field.type == "integer"
        assert session.state.new_fields == []
        assert session.generation_info == []

    def test_m2m_round_trip_proposes_nothing(self, open_session, catalog):
        catalog.add_field(
            "articles",
            {"field": "tags", "type": None, "schema": None, "meta": {"special": ["m2m"]}},
        )
        catalog.add_collection(
            "articles_tags",
            [{"field": "articles_id", "type": "integer"}, {"field": "tags_id", "type": "integer"}],
        )
        catalog.add_relation(
            {
                "collection": "articles_tags",
                "field": "articles_id",
                "related_collection": "articles",
                "meta": {"one_field": "tags", "junction_field": "tags_id"},
            }
        )
        catalog.add_relation(
            {
                "collection": "articles_tags",
                "field": "tags_id",
                "related_collection": "tags",
                "meta": {"junction_field": "articles_id"},
            }
        )

        session = open_session("articles", "m2m", field="tags")
        session.recompute()
        session.settle()

        current, related = session.state.relations
        assert current.field == "articles_id"
        assert related.related_collection == "tags"
        assert session.generation_info == []
        assert session.validate() == []

    def test_loads_reverse_side(self, open_session):
        session = open_session("users", "o2m", field="posts")

        [relation] = session.state.relations
        assert relation.collection == "posts"
        assert relation.field == "author"

    def test_existing_field_does_not_auto_fill(self, open_session):
        session = open_session("posts", "m2o", field="author")
        assert session.state.auto_fill_junction is False
        assert not session.pending

    def test_unknown_collection(self, catalog):
        with pytest.raises(CollectionNotFoundError):
            initialize(catalog, "missing", "author", "m2o")

    def test_unknown_field(self, catalog):
        with pytest.raises(FieldNotFoundError) as exc_info:
            initialize(catalog, "posts", "editor", "m2o")
        assert exc_info.value.context["available_fields"] == ["id", "author"]


class TestSessionOptions:
    """Tests for categories and settings."""

    def test_invalid_category(self, catalog):
        with pytest.raises(InvalidCategoryError) as exc_info:
            initialize(catalog, "articles", NEW_FIELD, "one-to-one")
        assert "m2m" in exc_info.value.context["valid_categories"]

    def test_initialize_returns_session(self, catalog):
        with initialize(catalog, "articles", NEW_FIELD, "standard") as session:
            assert isinstance(session, FieldSession)
            assert not session.is_existing

    def test_reverse_field_only_for_m2o(self, open_session):
        session = open_session("articles", "o2m")
        with pytest.raises(SchemaDraftError):
            session.set_reverse_field("articles")


class TestTeardown:
    """Tests for closing sessions."""

    def test_state_unavailable_after_teardown(self, catalog):
        session = initialize(catalog, "articles", NEW_FIELD, "m2m")
        teardown(session)

        assert session.closed
        with pytest.raises(SessionClosedError):
            session.state
        with pytest.raises(SessionClosedError):
            session.set("field.field", "tags")

    def test_pending_work_never_runs(self, catalog, clock):
        session = initialize(catalog, "articles", NEW_FIELD, "m2m", clock=clock)
        session.set("field.field", "tags")
        assert session.pending
        scheduler = session.scheduler

        teardown(session)
        clock.advance(10)

        assert scheduler.poll() == 0
        with pytest.raises(SessionClosedError):
            session.settle()

    def test_teardown_twice(self, catalog):
        session = initialize(catalog, "articles", NEW_FIELD, "standard")
        teardown(session)
        teardown(session)
        teardown(None)

    def test_context_manager(self, catalog):
        with initialize(catalog, "articles", NEW_FIELD, "standard") as session:
            session.set("field.field", "subtitle")
        assert session.closed


class TestRecompute:
    """Tests for explicit recompute."""

    def test_recompute_is_idempotent(self, open_session):
        session = open_session("articles", "translations")
        session.settle()
        first = session.state.model_dump()

        session.recompute()
        session.recompute()

        assert session.state.model_dump() == first

    def test_recompute_picks_up_catalog_changes(self, open_session, catalog):
        session = open_session("articles", "m2m")
        session.set("field.field", "labels")
        session.set("relations.1.related_collection", "labels")
        session.settle()
        assert "labels" in [c.collection for c in session.state.new_collections]

        catalog.add_collection("labels")
        session.recompute()

        assert [c.collection for c in session.state.new_collections] == ["articles_labels"]

    def test_manual_edit_of_proposal_is_replaced_on_resync(self, open_session):
        session = open_session("articles", "m2m")
        session.set("field.field", "tags")
        session.settle()
        session.set("new_fields.0.field", "renamed")

        session.set("relations.0.field", "article")
        session.settle()

        names = [f.field for f in session.state.new_fields]
        assert names == ["article", "tags_id"]


class TestValidation:
    """Tests for consistency checks."""

    def test_field_name_required(self, open_session):
        session = open_session("articles", "standard")

        [issue] = session.validate()
        assert issue.path == "field.field"
        assert not session.is_consistent

    def test_new_field_must_not_exist(self, open_session):
        session = open_session("articles", "standard")
        session.set("field.field", "title")

        [issue] = session.validate()
        assert "already exists" in issue.message

    def test_pending_work_is_reported(self, open_session):
        session = open_session("articles", "m2m")
        session.set("field.field", "tags")

        issues = session.validate()
        assert [issue.path for issue in issues] == [""]

        session.settle()
        assert session.is_consistent


class TestPresentationAutoSelect:
    """Tests for interface and display auto-selection."""

    def test_single_match_is_selected(self, open_session):
        session = open_session(
            "articles", "standard", interfaces=INTERFACES, displays=DISPLAYS
        )

        session.set("field.type", "dateTime")

        assert session.state.field.meta.interface == "datetime"

    def test_several_matches_are_left_to_user(self, open_session):
        session = open_session(
            "articles", "standard", interfaces=INTERFACES, displays=DISPLAYS
        )

        session.set("field.type", "boolean")

        assert session.state.field.meta.interface == "toggle"
        assert session.state.field.meta.display is None
        assert [d.id for d in session.available_displays] == ["boolean", "raw"]

    def test_alias_fields_match_by_group(self, open_session):
        session = open_session("articles", "m2m", interfaces=INTERFACES, displays=DISPLAYS)

        assert session.state.field.meta.interface == "list-m2m"
        assert session.state.field.meta.display == "related-values"

    def test_system_interfaces_are_hidden(self, open_session):
        session = open_session("articles", "standard", interfaces=INTERFACES)
        session.set("field.type", "dateTime")

        assert [i.id for i in session.available_interfaces] == ["datetime"]

    def test_existing_field_keeps_its_interface(self, open_session, catalog):
        catalog.add_field(
            "articles", {"field": "body", "type": "string", "meta": {"interface": "wysiwyg"}}
        )
        session = open_session("articles", "standard", field="body", interfaces=INTERFACES)

        assert session.state.field.meta.interface == "wysiwyg"


class TestSerialization:
    """Tests for the dict form of a session."""

    def test_to_dict_uses_wire_names(self, open_session):
        session = open_session("articles", "translations")
        session.settle()

        data = session.to_dict()

        assert data["category"] == "translations"
        assert data["is_existing"] is False
        assert data["field"]["schema"] is None
        assert data["new_collections"][0]["$type"] == "junction"
        assert data["new_fields"][0]["$type"] == "manyCurrent"
        assert len(data["new_rows"]["languages"]) == 7
        assert data["generation_info"][0] == {
            "name": "articles_translations",
            "kind": "collection",
        }
