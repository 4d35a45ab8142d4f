"""Tests for translations fields."""

from schemadraft import EngineSettings
from schemadraft.core.types import CollectionOrigin, FieldOrigin
from schemadraft.strategies.many_to_many import DEFAULT_LANGUAGES


class TestTranslationsScaffold:
    """Tests for the defaults of a new translations field."""

    def test_defaults(self, open_session):
        session = open_session("articles", "translations")

        state = session.state
        current, related = state.relations
        assert state.field.field == "translations"
        assert state.field.meta.special == ["translations"]
        assert state.field.meta.interface == "translations"
        assert current.collection == related.collection == "articles_translations"
        assert current.field == "articles_id"
        assert current.meta.one_field == "translations"
        assert related.related_collection == "languages"
        assert related.field == "languages_code"
        assert current.meta.junction_field == "languages_code"
        assert related.meta.junction_field == "articles_id"

    def test_full_scaffold_is_proposed(self, open_session):
        session = open_session("articles", "translations")
        session.settle()

        state = session.state
        origins = {c.collection: c.origin for c in state.new_collections}
        assert origins == {
            "articles_translations": CollectionOrigin.JUNCTION,
            "languages": CollectionOrigin.RELATED,
        }

        fields = {(f.collection, f.field): (f.type, f.origin) for f in state.new_fields}
        assert fields == {
            ("articles_translations", "articles_id"): ("integer", FieldOrigin.MANY_CURRENT),
            ("articles_translations", "languages_code"): ("string", FieldOrigin.MANY_RELATED),
        }

        assert state.new_rows == {"languages": DEFAULT_LANGUAGES}
        assert len(state.new_rows["languages"]) == 7
        assert session.validate() == []

    def test_languages_collection_is_keyed_by_code(self, open_session):
        session = open_session("articles", "translations")
        session.settle()

        languages = next(
            c for c in session.state.new_collections if c.collection == "languages"
        )
        assert [f.field for f in languages.fields] == ["code", "name"]
        assert languages.fields[0].field_schema.is_primary_key
        assert languages.meta.icon == "translate"

    def test_generation_info_lists_everything(self, open_session):
        session = open_session("articles", "translations")
        session.settle()

        names = [(item.kind, item.name) for item in session.generation_info]
        assert names == [
            ("collection", "articles_translations"),
            ("collection", "languages"),
            ("field", "articles_translations.id"),
            ("field", "languages.code"),
            ("field", "languages.name"),
            ("field", "articles_translations.articles_id"),
            ("field", "articles_translations.languages_code"),
        ]

    def test_existing_languages_collection_is_reused(self, open_session, catalog):
        catalog.add_collection(
            "languages",
            [{"field": "code", "type": "string", "schema": {"is_primary_key": True}}],
        )
        session = open_session("articles", "translations")
        session.settle()

        state = session.state
        assert [c.collection for c in state.new_collections] == ["articles_translations"]
        assert state.new_rows == {}

    def test_junction_name_avoids_collisions(self, open_session, catalog):
        catalog.add_collection("articles_translations")
        session = open_session("articles", "translations")

        assert session.state.relations[0].collection == "articles_translations_1"

    def test_renamed_junction_is_mirrored(self, open_session):
        session = open_session("articles", "translations")

        session.set("relations.0.collection", "article_texts")

        assert session.state.relations[1].collection == "article_texts"

    def test_custom_languages_collection(self, open_session):
        session = open_session(
            "articles", "translations", settings=EngineSettings(languages_collection="locales")
        )
        session.settle()

        related = session.state.relations[1]
        assert related.related_collection == "locales"
        assert related.field == "locales_code"
        assert list(session.state.new_rows) == ["locales"]
