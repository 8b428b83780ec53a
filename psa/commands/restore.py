"""Komenda: psa restore — usunięcie skryptów z listy usuwanych."""

from __future__ import annotations

import argparse

from catalog import CatalogCorruptError, restore
from psa._common import console, fail
from psa._db import get_connection, open_catalogs


def run(args: argparse.Namespace) -> None:
    try:
        conn = get_connection()
    except Exception as e:
        fail("połączenia z bazą", e)

    try:
        restored = restore(open_catalogs(conn), args.handles)
    except CatalogCorruptError as e:
        fail("katalogu", e)
    finally:
        conn.close()

    for handle in restored:
        console.print(f"[green]Przywrócono:[/green] [bold]{handle}[/bold]")
    for handle in sorted(set(args.handles) - set(restored)):
        console.print(f"[yellow]Brak w katalogu dequeued — pominięto:[/yellow] {handle}")
    console.print("[dim]Gotowe.[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "restore",
        help="Usuwa skrypty z listy usuwanych.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Usuwa skrypty z katalogu dequeued. Skrypt znów ładuje się normalnie;
przy kolejnym odwiedzeniu strony crawler może go ponownie odkryć.

Przykład:
  psa restore jquery-migrate
        """,
    )
    p.add_argument("handles", nargs="+", metavar="HANDLE", help="Handle skryptu.")
    p.set_defaults(func=run)
