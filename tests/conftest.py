"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from fake_typesense import FakeTypesense
from typebridge.client.client import TypesenseClient
from typebridge.config.settings import ConnectionConfig, Settings


@pytest.fixture
def config() -> ConnectionConfig:
    return ConnectionConfig(host="typesense.test", port=8108, api_key="test-admin-key")


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with one configured server."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        servers={"typesense": {"host": "typesense.test", "api_key": "test-admin-key"}},
    )


@pytest.fixture
def fake() -> FakeTypesense:
    return FakeTypesense(api_key="test-admin-key")


@pytest.fixture
def client(config: ConnectionConfig, fake: FakeTypesense) -> Iterator[TypesenseClient]:
    with TypesenseClient(config, transport=fake.transport) as c:
        yield c


@pytest.fixture
def books(fake: FakeTypesense) -> str:
    """A seeded ``books`` collection with two documents."""
    fake.add_collection(
        "books",
        [
            {"name": "title", "type": "string"},
            {"name": "year", "type": "int32"},
        ],
    )
    fake.documents["books"] = {
        "1": {"id": "1", "title": "Dune", "year": 1965},
        "2": {"id": "2", "title": "Neuromancer", "year": 1984},
    }
    return "books"
