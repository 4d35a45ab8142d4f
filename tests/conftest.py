"""Shared test fixtures for SchemaDraft."""

from collections.abc import Generator

import pytest

from schemadraft import (
    NEW_FIELD,
    EngineSettings,
    FieldSession,
    InMemoryCatalog,
    initialize,
    teardown,
)


class FakeClock:
    """Manually advanced clock for debounce tests."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Clock that only moves when told to."""
    return FakeClock()


@pytest.fixture
def settings() -> EngineSettings:
    """Default engine settings."""
    return EngineSettings()


@pytest.fixture
def catalog() -> InMemoryCatalog:
    """Catalog with a small blog schema.

    - articles (integer id) with a title field
    - tags (integer id)
    - users (uuid id)
    - posts (integer id) with an m2o ``author`` to users, and its reverse
      ``posts`` alias on users
    - directus_files (uuid id)
    """
    catalog = InMemoryCatalog()
    catalog.add_collection("articles", [{"field": "title", "type": "string"}])
    catalog.add_collection("tags", [{"field": "name", "type": "string"}])
    catalog.add_collection("users", primary_key_type="uuid")
    catalog.add_collection("posts", [{"field": "author", "type": "uuid"}])
    catalog.add_field(
        "users",
        {"field": "posts", "type": None, "schema": None, "meta": {"special": ["o2m"]}},
    )
    catalog.add_relation(
        {
            "collection": "posts",
            "field": "author",
            "related_collection": "users",
            "meta": {"one_field": "posts"},
        }
    )
    catalog.add_collection("directus_files", primary_key_type="uuid")
    return catalog


@pytest.fixture
def open_session(
    catalog: InMemoryCatalog, clock: FakeClock
) -> Generator[object, None, None]:
    """Factory opening new-field sessions on the ``catalog`` fixture.

    Sessions are torn down after the test.
    """
    sessions: list[FieldSession] = []

    def _open(collection: str, category: str, field: str = NEW_FIELD, **options) -> FieldSession:
        options.setdefault("clock", clock)
        session = initialize(catalog, collection, field, category, **options)
        sessions.append(session)
        return session

    yield _open
    for session in sessions:
        teardown(session)
