"""Komenda: psa apply-schema — tworzy tabelę option magazynu katalogów."""

from __future__ import annotations

import argparse
import pathlib

from psa._common import console, fail
from psa._db import get_connection

SCHEMA_PATH = pathlib.Path(__file__).resolve().parents[2] / "db" / "schema.sql"


def apply_schema(conn, sql: str) -> None:
    """Wykonuje cały plik jednym zapytaniem, poza transakcją."""
    conn.autocommit = True
    with conn.cursor() as cur:
        cur.execute(sql)


def run(args: argparse.Namespace) -> None:
    path = pathlib.Path(args.schema)
    try:
        sql = path.read_text(encoding="utf-8")
    except OSError as e:
        fail("odczytu schematu", e)

    try:
        conn = get_connection()
    except Exception as e:
        fail("połączenia z bazą", e)

    try:
        apply_schema(conn, sql)
    except Exception as e:
        fail("wykonania schematu", e)
    finally:
        conn.close()

    console.print(f"[green]Schemat zastosowany:[/green] {path}")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "apply-schema",
        help="Tworzy tabelę option w bazie (idempotentne).",
        description="Wykonuje db/schema.sql; CREATE ... IF NOT EXISTS pozwala uruchamiać wielokrotnie.",
    )
    p.add_argument("--schema", default=str(SCHEMA_PATH), help=f"Plik SQL (domyślnie {SCHEMA_PATH.name})")
    p.set_defaults(func=run)
