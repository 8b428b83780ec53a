"""Komenda: psa dequeue — przeniesienie odkrytych skryptów do usuwanych."""

from __future__ import annotations

import argparse

from catalog import CatalogCorruptError, dequeue
from psa._common import console, fail
from psa._db import get_connection, open_catalogs


def run(args: argparse.Namespace) -> None:
    try:
        conn = get_connection()
    except Exception as e:
        fail("połączenia z bazą", e)

    try:
        moved = dequeue(open_catalogs(conn), args.handles)
    except CatalogCorruptError as e:
        fail("katalogu", e)
    finally:
        conn.close()

    for handle in moved:
        console.print(f"[green]Przeniesiono do usuwanych:[/green] [bold]{handle}[/bold]")
    for handle in sorted(set(args.handles) - set(moved)):
        console.print(f"[yellow]Brak w katalogu found — pominięto:[/yellow] {handle}")
    console.print("[dim]Gotowe.[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "dequeue",
        help="Przenosi odkryte skrypty do usuwanych.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Przenosi skrypty z katalogu found do dequeued.

Nowy rekord dostaje regułę domyślną {"is_frontend": true}:
skrypt jest usuwany tylko na stronach spoza panelu administracyjnego.
Reguły można potem zmienić komendą `psa rules set`.

Przykład:
  psa dequeue jquery-migrate wp-embed
        """,
    )
    p.add_argument("handles", nargs="+", metavar="HANDLE", help="Handle skryptu.")
    p.set_defaults(func=run)
