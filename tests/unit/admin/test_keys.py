"""Tests for API key administration."""

from __future__ import annotations

import pytest

from fake_typesense import FakeTypesense
from typebridge.admin.keys import (
    KeyAdministration,
    format_expires_at,
    format_list,
    split_list,
    unwrap_keys,
)
from typebridge.client.client import TypesenseClient
from typebridge.exceptions import TypesenseError
from typebridge.models.key import NEVER_EXPIRES, CreatedKey, OneTimeSecret


@pytest.fixture
def admin(client: TypesenseClient) -> KeyAdministration:
    return KeyAdministration(client, server_id="typesense")


# ── Formatting helpers ───────────────────────────────────────────────────────


class TestSplitList:
    def test_trims_whitespace(self) -> None:
        assert split_list("admin, search") == ["admin", "search"]

    def test_keeps_order_and_patterns(self) -> None:
        assert split_list("products,coll.*, books") == ["products", "coll.*", "books"]

    def test_drops_empty_tokens(self) -> None:
        assert split_list(" a,, b ,") == ["a", "b"]

    @pytest.mark.parametrize("value", ["", None, " , "])
    def test_empty(self, value: str | None) -> None:
        assert split_list(value) == []


class TestFormatExpiresAt:
    def test_never(self) -> None:
        assert format_expires_at(NEVER_EXPIRES) == "never"

    def test_timestamp(self) -> None:
        assert format_expires_at(1700000000) == "2023-11-14 22:13:20"

    def test_epoch(self) -> None:
        assert format_expires_at(0) == "1970-01-01 00:00:00"

    def test_timezone(self) -> None:
        assert format_expires_at(1700000000, "Europe/Paris") == "2023-11-14 23:13:20"


def test_format_list() -> None:
    assert format_list(["documents:search", "collections:*"]) == "[documents:search, collections:*]"
    assert format_list([]) == "[]"


class TestUnwrapKeys:
    def test_single_entry_wrapper(self) -> None:
        assert unwrap_keys({"keys": [{"id": 1}]}) == [{"id": 1}]

    @pytest.mark.parametrize("response", [{}, None, [], {"keys": None}, {"keys": "oops"}])
    def test_falls_back_to_empty(self, response: object) -> None:
        assert unwrap_keys(response) == []


# ── KeyAdministration ────────────────────────────────────────────────────────


class TestListing:
    def test_rows(self, admin: KeyAdministration, fake: FakeTypesense) -> None:
        fake.add_key(
            description="frontend search",
            actions=["documents:search"],
            collections=["books", "coll.*"],
        )
        fake.add_key(description="expiring", actions=["*"], collections=["*"], expires_at=1700000000)

        rows = admin.rows()
        assert [r.id for r in rows] == [1, 2]
        first, second = rows
        assert first.key_prefix == "k001"
        assert first.description == "frontend search"
        assert first.actions == "[documents:search]"
        assert first.collections == "[books, coll.*]"
        assert first.expires_at == "never"
        assert first.delete_url == "/v1/servers/typesense/keys/1/delete"
        assert second.expires_at == "2023-11-14 22:13:20"

    def test_no_keys(self, admin: KeyAdministration) -> None:
        assert admin.rows() == []

    def test_timezone_applies(self, client: TypesenseClient, fake: FakeTypesense) -> None:
        fake.add_key(expires_at=1700000000)
        admin = KeyAdministration(client, timezone="Europe/Paris")
        assert admin.rows()[0].expires_at == "2023-11-14 23:13:20"

    def test_errors_propagate(self, admin: KeyAdministration, fake: FakeTypesense) -> None:
        fake.failures[("GET", "/keys")] = (500, "boom")
        with pytest.raises(TypesenseError, match="boom"):
            admin.rows()


class TestCreate:
    def test_create_key(self, admin: KeyAdministration, fake: FakeTypesense) -> None:
        created = admin.create_key("frontend", "documents:search, documents:get", "books, coll.*")

        stored = fake.keys[created.key.id]
        assert stored["actions"] == ["documents:search", "documents:get"]
        assert stored["collections"] == ["books", "coll.*"]
        assert created.key.description == "frontend"
        assert created.secret.reveal() == "secret0001xyz"

    def test_secret_revealed_once(self, admin: KeyAdministration) -> None:
        created = admin.create_key("frontend", "documents:search", "books")
        created.secret.reveal()
        assert created.secret.revealed
        with pytest.raises(RuntimeError, match="already been revealed"):
            created.secret.reveal()

    def test_secret_not_in_repr(self, admin: KeyAdministration) -> None:
        created = admin.create_key("frontend", "documents:search", "books")
        assert "secret0001xyz" not in repr(created)
        assert "secret0001xyz" not in str(created.secret)
        assert "secret0001xyz" not in created.key.model_dump_json()

    def test_create_rejected(self, admin: KeyAdministration) -> None:
        with pytest.raises(TypesenseError) as exc_info:
            admin.create_key("frontend", " , ", "books")
        assert exc_info.value.code == 400


class TestDelete:
    def test_delete_key(self, admin: KeyAdministration, fake: FakeTypesense) -> None:
        key = fake.add_key()
        admin.delete_key(key["id"])
        assert fake.keys == {}

    def test_delete_missing_key_raises(self, admin: KeyAdministration) -> None:
        with pytest.raises(TypesenseError) as exc_info:
            admin.delete_key(404)
        assert exc_info.value.code == 404


def test_created_key_prefix_defaults_from_value() -> None:
    created = CreatedKey.from_response({"id": 7, "value": "abcd1234", "actions": ["*"], "collections": ["*"]})
    assert created.key.value_prefix == "abcd"
    assert isinstance(created.secret, OneTimeSecret)
    assert created.key.never_expires
