"""CLI entry point for typebridge."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typebridge",
        description="typebridge — Typesense client façade and API key administration",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--server",
        "-s",
        type=str,
        default=None,
        help="Server identifier (defaults to settings.default_server)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"typebridge {_get_version()}",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("health", help="Show Typesense health")
    commands.add_parser("debug", help="Show Typesense debug information")
    commands.add_parser("metrics", help="Show Typesense metrics")
    commands.add_parser("collections", help="List collections")

    keys = commands.add_parser("keys", help="Manage API keys")
    key_commands = keys.add_subparsers(dest="key_command", required=True)
    key_commands.add_parser("list", help="List existing keys")
    create = key_commands.add_parser("create", help="Create a key (the secret is shown once)")
    create.add_argument("--description", "-d", required=True, help="Internal description")
    create.add_argument("--actions", "-a", required=True, help="Comma separated actions, e.g. 'documents:search'")
    create.add_argument("--collections", required=True, help="Comma separated collection names or patterns")
    delete = key_commands.add_parser("delete", help="Delete a key")
    delete.add_argument("key_id", type=int, help="Key id")

    serve = commands.add_parser("serve", help="Run the admin HTTP API")
    serve.add_argument("--host", type=str, default=None, help="Server bind address (overrides config)")
    serve.add_argument("--port", "-p", type=int, default=None, help="Server port (overrides config)")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = _build_parser().parse_args(argv)

    log_level = (args.log_level or "warning").upper()
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    from typebridge.config.settings import Settings

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    if args.log_level:
        settings.observability.log_level = args.log_level

    if args.command == "serve":
        _serve(settings, args)
        return

    from typebridge.exceptions import TypesenseError

    try:
        _emit(_run(settings, args))
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        sys.exit(1)
    except TypesenseError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _run(settings: Any, args: argparse.Namespace) -> Any:
    from typebridge.admin.keys import KeyAdministration
    from typebridge.client.client import TypesenseClient

    server_id = args.server or settings.default_server
    with TypesenseClient(settings.connection(server_id)) as client:
        if args.command == "health":
            return client.retrieve_health()
        if args.command == "debug":
            return client.retrieve_debug()
        if args.command == "metrics":
            return client.retrieve_metrics()
        if args.command == "collections":
            return [c.model_dump(mode="json") for c in client.retrieve_collections()]

        admin = KeyAdministration(client, server_id=server_id, timezone=settings.admin.timezone)
        if args.key_command == "list":
            return [row.model_dump() for row in admin.rows()]
        if args.key_command == "create":
            created = admin.create_key(args.description, args.actions, args.collections)
            print(
                "The generated key is only shown once. Store it in a secure place.",
                file=sys.stderr,
            )
            return {**created.key.model_dump(), "value": created.secret.reveal()}
        return admin.delete_key(args.key_id)


def _emit(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _serve(settings: Any, args: argparse.Namespace) -> None:
    if args.host:
        settings.server.host = args.host
    if args.port:
        settings.server.port = args.port

    from typebridge.api.app import create_app
    from typebridge.observability.logging import setup_logging

    setup_logging(settings.observability)

    import uvicorn

    if args.reload:
        uvicorn.run(
            "typebridge.api.app:create_app",
            factory=True,
            host=settings.server.host,
            port=settings.server.port,
            reload=True,
            log_level=settings.observability.log_level.lower(),
        )
        return

    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.observability.log_level.lower(),
    )


def _get_version() -> str:
    """Get the package version."""
    try:
        from typebridge import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()
