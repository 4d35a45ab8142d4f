"""Tests for many-to-one and single file fields."""

from schemadraft import EngineSettings
from schemadraft.core.types import CollectionOrigin, FieldOrigin


class TestManyToOneNewField:
    """Tests for creating an m2o field."""

    def test_initial_state(self, open_session):
        session = open_session("articles", "m2o")

        state = session.state
        assert state.field.type == "integer"
        assert len(state.relations) == 1
        assert state.relations[0].collection == "articles"

    def test_field_name_mirrors_into_relation(self, open_session):
        session = open_session("articles", "m2o")

        session.set("field.field", "author")

        assert session.state.relations[0].field == "author"

    def test_type_follows_related_primary_key(self, open_session):
        session = open_session("articles", "m2o")
        session.set("field.field", "author")

        session.set("relations.0.related_collection", "users")

        assert session.state.field.type == "uuid"

    def test_existing_related_collection_is_not_proposed(self, open_session):
        session = open_session("articles", "m2o")
        session.set("field.field", "author")
        session.set("relations.0.related_collection", "users")
        session.settle()

        assert session.state.new_collections == []
        assert session.validate() == []

    def test_missing_related_collection_is_proposed(self, open_session):
        session = open_session("articles", "m2o")
        session.set("field.field", "category")
        session.set("relations.0.related_collection", "categories")
        session.settle()

        assert session.state.field.type == "integer"
        [proposed] = session.state.new_collections
        assert proposed.collection == "categories"
        assert proposed.origin == CollectionOrigin.RELATED
        assert proposed.fields[0].field == "id"
        assert proposed.fields[0].field_schema.has_auto_increment

    def test_proposal_follows_renamed_related_collection(self, open_session):
        session = open_session("articles", "m2o")
        session.set("relations.0.related_collection", "categories")
        session.settle()

        session.set("relations.0.related_collection", "sections")
        session.settle()

        assert [c.collection for c in session.state.new_collections] == ["sections"]

    def test_renamed_primary_key_survives_resync(self, open_session):
        session = open_session("articles", "m2o")
        session.set("relations.0.related_collection", "categories")
        session.settle()
        session.set("new_collections.0.fields.0.field", "key")

        session.set("relations.0.related_collection", "sections")
        session.settle()

        assert session.state.new_collections[0].fields[0].field == "key"

    def test_clearing_related_collection_withdraws_proposal(self, open_session):
        session = open_session("articles", "m2o")
        session.set("relations.0.related_collection", "categories")
        session.settle()

        session.set("relations.0.related_collection", "")
        session.settle()

        assert session.state.new_collections == []

    def test_debounced_until_window_passes(self, open_session, clock, settings):
        session = open_session("articles", "m2o")
        session.set("relations.0.related_collection", "categories")

        assert session.pending
        assert session.state.new_collections == []

        clock.advance(settings.debounce_window)
        assert session.poll() == 1
        assert not session.pending
        assert len(session.state.new_collections) == 1

    def test_related_collection_required(self, open_session):
        session = open_session("articles", "m2o")
        session.set("field.field", "author")

        paths = [issue.path for issue in session.validate()]
        assert paths == ["relations.0.related_collection"]


class TestReverseField:
    """Tests for the reverse o2m alias proposed alongside an m2o."""

    def test_reverse_alias_is_proposed(self, open_session):
        session = open_session("articles", "m2o")
        session.set("field.field", "author")
        session.set("relations.0.related_collection", "users")

        session.set_reverse_field("articles")

        assert session.state.relations[0].meta.one_field == "articles"
        [reverse] = session.state.new_fields
        assert reverse.collection == "users"
        assert reverse.field == "articles"
        assert reverse.origin == FieldOrigin.REVERSE
        assert reverse.is_alias
        assert reverse.meta.special == ["o2m"]

    def test_existing_reverse_field_is_not_proposed(self, open_session):
        session = open_session("articles", "m2o")
        session.set("relations.0.related_collection", "users")

        session.set_reverse_field("posts")

        assert session.state.new_fields == []

    def test_withdrawing_reverse_field(self, open_session):
        session = open_session("articles", "m2o")
        session.set("relations.0.related_collection", "users")
        session.set_reverse_field("articles")

        session.set_reverse_field(None)

        assert session.state.relations[0].meta.one_field is None
        assert session.state.new_fields == []

    def test_reverse_follows_related_collection(self, open_session):
        session = open_session("articles", "m2o")
        session.set("relations.0.related_collection", "users")
        session.set_reverse_field("articles")

        session.set("relations.0.related_collection", "tags")

        assert [(f.collection, f.field) for f in session.state.new_fields] == [
            ("tags", "articles")
        ]


class TestFileField:
    """Tests for the file category."""

    def test_new_field_points_at_files(self, open_session):
        session = open_session("articles", "file")

        state = session.state
        assert state.field.type == "uuid"
        assert state.relations[0].collection == "articles"
        assert state.relations[0].related_collection == "directus_files"

    def test_field_name_mirrors_into_relation(self, open_session):
        session = open_session("articles", "file")
        session.set("field.field", "cover")
        session.settle()

        assert session.state.relations[0].field == "cover"
        assert session.generation_info == []
        assert session.validate() == []

    def test_relation_field_required(self, open_session):
        session = open_session("articles", "file")

        paths = [issue.path for issue in session.validate()]
        assert "relations.0.field" in paths

    def test_files_collection_from_settings(self, open_session):
        session = open_session(
            "articles", "file", settings=EngineSettings(files_collection="media")
        )

        assert session.state.relations[0].related_collection == "media"
