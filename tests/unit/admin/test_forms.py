"""Tests for the API keys form contract."""

from __future__ import annotations

import pytest

from fake_typesense import FakeTypesense
from typebridge.admin.forms import SECRET_WARNING, ApiKeysForm, Severity
from typebridge.admin.keys import KeyAdministration
from typebridge.client.client import TypesenseClient
from typebridge.exceptions import TypesenseError


@pytest.fixture
def form(client: TypesenseClient) -> ApiKeysForm:
    return ApiKeysForm(KeyAdministration(client))


class TestRender:
    def test_fields(self, form: ApiKeysForm) -> None:
        tree = form.render({})
        assert tree.type == "form"
        for name in ("description", "actions", "collections"):
            field = tree.find(name)
            assert field is not None
            assert field.type == "textfield"
            assert field.required
        assert tree.find("submit").title == "Add new"  # type: ignore[union-attr]

    def test_existing_keys_table(self, form: ApiKeysForm, fake: FakeTypesense) -> None:
        fake.add_key(description="frontend")
        table = form.render().find("existing_keys")
        assert table is not None
        assert table.header[0] == "ID"
        assert table.empty == "No keys found."
        assert table.rows[0]["description"] == "frontend"
        assert table.rows[0]["expires_at"] == "never"

    def test_server_unavailable(self) -> None:
        tree = ApiKeysForm(None).render()
        assert tree.find("description") is None
        message = tree.find("unavailable")
        assert message is not None
        assert message.severity is Severity.ERROR


class TestValidate:
    def test_valid(self, form: ApiKeysForm) -> None:
        assert form.validate({"description": "d", "actions": "a", "collections": "c"}) == []

    def test_missing_fields(self, form: ApiKeysForm) -> None:
        errors = form.validate({"description": "  ", "actions": ""})
        assert [e.field for e in errors] == ["description", "actions", "collections"]

    def test_separators_only(self, form: ApiKeysForm) -> None:
        errors = form.validate({"description": "d", "actions": ",", "collections": "books"})
        assert [e.field for e in errors] == ["actions"]
        assert "at least one" in errors[0].message


class TestSubmit:
    def test_reveals_secret_once(self, form: ApiKeysForm, fake: FakeTypesense) -> None:
        outcome = form.submit({"description": "d", "actions": "documents:search", "collections": "books"})
        assert outcome.severity is Severity.STATUS
        assert "secret0001xyz" in outcome.message
        assert outcome.warning == SECRET_WARNING
        assert len(fake.keys) == 1

    def test_failure_propagates(self, form: ApiKeysForm, fake: FakeTypesense) -> None:
        fake.failures[("POST", "/keys")] = (400, "Could not create API key.")
        with pytest.raises(TypesenseError, match="Could not create API key"):
            form.submit({"description": "d", "actions": "a", "collections": "c"})

    def test_server_unavailable(self) -> None:
        outcome = ApiKeysForm(None).submit({"description": "d", "actions": "a", "collections": "c"})
        assert outcome.severity is Severity.ERROR
