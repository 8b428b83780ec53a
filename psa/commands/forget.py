"""Komenda: psa forget — usunięcie wpisów z katalogu odkrytych."""

from __future__ import annotations

import argparse

from catalog import CatalogCorruptError, forget
from psa._common import console, fail
from psa._db import get_connection, open_catalogs


def run(args: argparse.Namespace) -> None:
    try:
        conn = get_connection()
    except Exception as e:
        fail("połączenia z bazą", e)

    try:
        deleted = forget(open_catalogs(conn), args.handles)
    except CatalogCorruptError as e:
        fail("katalogu", e)
    finally:
        conn.close()

    console.print(f"[green]Usunięto {len(deleted)} wpis(ów) z [bold]found[/bold][/green]")
    console.print("[dim]Gotowe.[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "forget",
        help="Usuwa wpisy z katalogu odkrytych.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Usuwa wpisy z katalogu found. Metadane odkrytego skryptu nie są
odświeżane automatycznie — usunięcie wpisu pozwala crawlerowi
zapisać go od nowa.

Przykład:
  psa forget my-theme-main
        """,
    )
    p.add_argument("handles", nargs="+", metavar="HANDLE", help="Handle skryptu.")
    p.set_defaults(func=run)
