"""Tests for scalar and presentation fields."""

import pytest

from schemadraft.exceptions import InvalidFieldTypeError


class TestStandardField:
    """Tests for the standard category."""

    def test_new_field_defaults(self, open_session):
        session = open_session("articles", "standard")

        assert session.state.field.type == "string"
        assert session.state.relations == []
        assert session.generation_info == []

    def test_boolean_type(self, open_session):
        session = open_session("articles", "standard")

        session.set("field.type", "boolean")

        field = session.state.field
        assert field.meta.special == ["boolean"]
        assert field.field_schema.default_value is False
        assert field.field_schema.is_nullable is False

    @pytest.mark.parametrize("field_type", ["uuid", "hash", "json", "csv"])
    def test_special_types_are_tagged(self, open_session, field_type):
        session = open_session("articles", "standard")

        session.set("field.type", field_type)

        assert session.state.field.meta.special == [field_type]

    def test_type_change_resets_presentation(self, open_session):
        session = open_session("articles", "standard")
        session.set("field.meta.interface", "input")
        session.set("field.field_schema.max_length", 20)
        session.set("field.field_schema.default_value", "draft")

        session.set("field.type", "text")

        field = session.state.field
        assert field.meta.interface is None
        assert field.meta.special is None
        assert field.field_schema.max_length is None
        assert field.field_schema.default_value is None
        assert field.field_schema.is_nullable is True

    def test_boolean_back_to_string_clears_tag(self, open_session):
        session = open_session("articles", "standard")
        session.set("field.type", "boolean")

        session.set("field.type", "string")

        assert session.state.field.meta.special is None
        assert session.state.field.field_schema.is_nullable is True

    def test_unknown_type_rejected(self, open_session):
        session = open_session("articles", "standard")

        with pytest.raises(InvalidFieldTypeError) as exc_info:
            session.set("field.type", "varchar")

        assert "integer" in exc_info.value.context["valid_types"]
        assert session.state.field.type == "string"


class TestPresentationField:
    """Tests for the presentation category."""

    def test_new_field_is_alias(self, open_session):
        session = open_session("articles", "presentation")

        field = session.state.field
        assert field.is_alias
        assert field.meta.special == ["alias", "no-data"]
        assert session.state.relations == []

    def test_nothing_to_create(self, open_session):
        session = open_session("articles", "presentation")
        session.set("field.field", "divider")
        session.settle()

        assert session.generation_info == []
        assert session.validate() == []
