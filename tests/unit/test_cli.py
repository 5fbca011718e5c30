"""Tests for the typebridge CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from fake_typesense import FakeTypesense
from typebridge import cli
from typebridge.client import client as client_module
from typebridge.config.settings import ConnectionConfig


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "typebridge.yaml"
    path.write_text("servers:\n  typesense:\n    host: typesense.test\n    api_key: test-admin-key\n")
    return path


@pytest.fixture(autouse=True)
def fake_transport(monkeypatch: pytest.MonkeyPatch, fake: FakeTypesense) -> None:
    real = client_module.TypesenseClient

    def factory(config: ConnectionConfig) -> client_module.TypesenseClient:
        return real(config, transport=fake.transport)

    monkeypatch.setattr(client_module, "TypesenseClient", factory)


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> object:
    cli.main(list(argv))
    return json.loads(capsys.readouterr().out)


class TestCli:
    def test_health(self, config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(capsys, "-c", str(config_file), "health") == {"ok": True}

    def test_collections(self, config_file: Path, fake: FakeTypesense, capsys: pytest.CaptureFixture[str]) -> None:
        fake.add_collection("books")
        data = _run(capsys, "-c", str(config_file), "collections")
        assert [c["name"] for c in data] == ["books"]

    def test_keys_list(self, config_file: Path, fake: FakeTypesense, capsys: pytest.CaptureFixture[str]) -> None:
        fake.add_key(description="frontend")
        rows = _run(capsys, "-c", str(config_file), "keys", "list")
        assert rows[0]["description"] == "frontend"
        assert rows[0]["expires_at"] == "never"

    def test_keys_create_shows_secret(
        self, config_file: Path, fake: FakeTypesense, capsys: pytest.CaptureFixture[str]
    ) -> None:
        cli.main(["-c", str(config_file), "keys", "create", "-d", "ci", "-a", "admin, search", "--collections", "*"])
        captured = capsys.readouterr()
        assert json.loads(captured.out)["value"] == "secret0001xyz"
        assert "only shown once" in captured.err
        assert fake.keys[1]["actions"] == ["admin", "search"]

    def test_keys_delete(self, config_file: Path, fake: FakeTypesense, capsys: pytest.CaptureFixture[str]) -> None:
        key = fake.add_key()
        assert _run(capsys, "-c", str(config_file), "keys", "delete", str(key["id"])) == {"id": key["id"]}

    def test_remote_error_exits(self, config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["-c", str(config_file), "keys", "delete", "99"])
        assert exc_info.value.code == 1
        assert "Not Found" in capsys.readouterr().err

    def test_unknown_server_exits(self, config_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            cli.main(["-c", str(config_file), "--server", "staging", "health"])
        assert "staging" in capsys.readouterr().err

    def test_missing_config_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["-c", str(tmp_path / "nope.yaml"), "health"])
        assert exc_info.value.code == 1
