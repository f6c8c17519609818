"""Command line interface: serve the API and inspect or seed the store."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from veriflow.config import Settings, load_settings
from veriflow.engine import MockSQLEngine
from veriflow.errors import VeriflowError
from veriflow.log import configure_logging
from veriflow.schema import get_schema_info
from veriflow.seed import seed_store
from veriflow.store import TableStore, open_backend

console = Console()


def _build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="veriflow", description="Natural language → SQL over a mock JSON database."
    )
    parser.add_argument("--config", help="Path to a veriflow.yaml config file.")
    parser.add_argument("--db", help="Store JSON file (overrides config).")
    parser.add_argument("--log-level", help="Log level (overrides config).")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", help="Bind address (overrides config).")
    serve.add_argument("--port", type=int, help="Port (overrides config).")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes.")

    init_db = sub.add_parser("init-db", help="Populate an empty store with sample data.")
    init_db.add_argument(
        "--force", action="store_true", help="Overwrite existing customers and transactions."
    )

    sub.add_parser("schema", help="Print the schema inferred from the store.")

    query = sub.add_parser("query", help="Run one SQL statement through the mock engine.")
    query.add_argument("sql", help="Statement text.")
    query.add_argument("--json", action="store_true", help="Print raw JSON instead of a table.")
    return parser


def _settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    if args.db:
        settings.db_path = args.db
        settings.db_url = None
    if args.log_level:
        settings.log_level = args.log_level
    return settings


def _rows_table(rows: list[dict], title: str | None = None) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*("" if row.get(c) is None else str(row.get(c)) for c in columns))
    return table


async def _init_db(settings: Settings, force: bool) -> int:
    store = await TableStore(open_backend(settings.db_path, settings.db_url)).load()
    if await seed_store(store, force=force):
        console.print(f"[green]Sample data written[/green] [dim]{store.location}[/dim]")
    else:
        console.print("[yellow]Store already contains data, nothing written (use --force)[/yellow]")
    return 0


async def _schema(settings: Settings) -> int:
    schema = await get_schema_info(open_backend(settings.db_path, settings.db_url))
    if not schema:
        console.print("[yellow]No schema could be inferred[/yellow]")
        return 0
    console.print(_rows_table([c.to_dict() for c in schema], title="Inferred schema"))
    return 0


async def _query(settings: Settings, sql: str, as_json: bool) -> int:
    store = await TableStore(open_backend(settings.db_path, settings.db_url)).load()
    result = await MockSQLEngine(store, row_limit=settings.row_limit).execute(sql)
    if as_json:
        console.print_json(json.dumps(result.to_dict(), default=str))
        return 0
    console.print(f"[green]{result.message}[/green]")
    if result.data:
        console.print(_rows_table(result.data))
    return 0


def _serve(settings: Settings, args: argparse.Namespace) -> int:
    import uvicorn

    host = args.host or settings.host
    port = args.port or settings.port
    if args.reload:
        # Reload needs an import string; the factory re-reads settings
        uvicorn.run(
            "veriflow.api.app:app_from_env", factory=True, host=host, port=port, reload=True
        )
    else:
        from veriflow.api import create_app

        uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_cli_parser()
    args = parser.parse_args(argv)

    try:
        settings = _settings(args)
        configure_logging(settings.log_level)

        if args.command == "serve":
            return _serve(settings, args)
        if args.command == "init-db":
            return asyncio.run(_init_db(settings, args.force))
        if args.command == "schema":
            return asyncio.run(_schema(settings))
        if args.command == "query":
            return asyncio.run(_query(settings, args.sql, args.json))
    except (VeriflowError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1
    parser.error(f"unknown command {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
