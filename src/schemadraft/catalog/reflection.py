"""Snapshot a live database into an in-memory catalog using SQLAlchemy reflection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Float,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    Uuid,
    create_engine,
    inspect,
)
from sqlalchemy.exc import SQLAlchemyError

from schemadraft.catalog.memory import InMemoryCatalog
from schemadraft.core.types import FieldRecord, FieldSchema, FieldType, RelationRecord
from schemadraft.exceptions import CatalogError

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.types import TypeEngine

logger = logging.getLogger(__name__)

# Order matters: subclasses before their bases (Float < Numeric, Text < String)
_TYPE_MAP: list[tuple[type[TypeEngine[Any]], FieldType]] = [
    (Boolean, FieldType.BOOLEAN),
    (BigInteger, FieldType.BIG_INTEGER),
    (Integer, FieldType.INTEGER),
    (Float, FieldType.FLOAT),
    (Numeric, FieldType.DECIMAL),
    (DateTime, FieldType.DATETIME),
    (Date, FieldType.DATE),
    (Time, FieldType.TIME),
    (Uuid, FieldType.UUID),
    (JSON, FieldType.JSON),
    (Text, FieldType.TEXT),
    (String, FieldType.STRING),
]


def to_field_type(column_type: TypeEngine[Any]) -> str:
    """Map a reflected SQLAlchemy column type to a field type (``string`` if unknown)."""
    for sa_type, field_type in _TYPE_MAP:
        if isinstance(column_type, sa_type):
            return field_type
    return FieldType.STRING


def reflect_catalog(engine: Engine, schema: str | None = None) -> InMemoryCatalog:
    """Build a catalog snapshot of every table visible to ``engine``.

    Tables become collections, columns become fields and foreign keys become
    many-to-one relation records. Column server defaults are SQL expressions,
    not literal values, so they are not copied into ``default_value``.

    Args:
        engine: SQLAlchemy engine to inspect
        schema: Database schema to read (default schema if None)

    Returns:
        Catalog snapshot

    Raises:
        CatalogError: If the database can't be inspected
    """
    try:
        inspector = inspect(engine)
        table_names = inspector.get_table_names(schema=schema)
    except SQLAlchemyError as e:
        raise CatalogError(f"Could not inspect database: {e}") from e

    catalog = InMemoryCatalog()
    for table in table_names:
        pk_constraint = inspector.get_pk_constraint(table, schema=schema)
        pk_columns = set(pk_constraint.get("constrained_columns") or [])
        unique_columns = {
            tuple(constraint["column_names"])
            for constraint in inspector.get_unique_constraints(table, schema=schema)
        }

        fields = []
        for column in inspector.get_columns(table, schema=schema):
            name = column["name"]
            field_type = to_field_type(column["type"])
            is_pk = name in pk_columns
            fields.append(
                FieldRecord(
                    collection=table,
                    field=name,
                    type=field_type,
                    field_schema=FieldSchema(
                        max_length=getattr(column["type"], "length", None),
                        is_nullable=bool(column.get("nullable", True)),
                        is_unique=(name,) in unique_columns,
                        numeric_precision=getattr(column["type"], "precision", None),
                        numeric_scale=getattr(column["type"], "scale", None),
                        is_primary_key=is_pk,
                        has_auto_increment=is_pk
                        and len(pk_columns) == 1
                        and field_type in (FieldType.INTEGER, FieldType.BIG_INTEGER)
                        and column.get("autoincrement", "auto") in (True, "auto"),
                    ),
                )
            )
        catalog.add_collection(table, fields, primary_key=None)

        for foreign_key in inspector.get_foreign_keys(table, schema=schema):
            # Composite keys have no single-column field to attach to
            if len(foreign_key["constrained_columns"]) != 1:
                logger.debug("Skipping composite foreign key on %s", table)
                continue
            catalog.add_relation(
                RelationRecord(
                    collection=table,
                    field=foreign_key["constrained_columns"][0],
                    related_collection=foreign_key["referred_table"],
                )
            )

    logger.debug("Reflected %d collections", len(table_names))
    return catalog


def catalog_from_url(url: str, schema: str | None = None) -> InMemoryCatalog:
    """Connect to ``url``, snapshot its schema and dispose the engine."""
    try:
        engine = create_engine(url)
    except (SQLAlchemyError, ValueError) as e:
        raise CatalogError(f"Invalid database URL '{url}': {e}", {"url": url}) from e
    try:
        return reflect_catalog(engine, schema=schema)
    finally:
        engine.dispose()
