"""Komenda: psa reset — czyszczenie całych katalogów."""

from __future__ import annotations

import argparse

from catalog import clear_discovered
from data_model import CatalogName
from psa._common import console, fail
from psa._db import get_connection, open_catalogs


def run(args: argparse.Namespace) -> None:
    cel: str = args.cel

    try:
        conn = get_connection()
    except Exception as e:
        fail("połączenia z bazą", e)

    catalogs = open_catalogs(conn)
    targets = list(CatalogName) if cel == "all" else [CatalogName.from_label(cel)]
    try:
        for name in targets:
            if name == CatalogName.DISCOVERED:
                clear_discovered(catalogs)
            else:
                catalogs.drop(name)
            console.print(f"[green]Wyczyszczono katalog [bold]{name.label}[/bold] ({name.value})[/green]")
    except Exception as e:
        fail("czyszczenia", e)
    finally:
        conn.close()

    console.print("[dim]Gotowe.[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "reset",
        help="Czyści katalog (bez potwierdzenia).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Usuwa cały katalog z magazynu. Działa natychmiast, bez pytania o potwierdzenie.

Cele:
  found      Czyści log odkrytych skryptów.
  dequeued   Usuwa wszystkie reguły usuwania (skrypty wracają do normalnego ładowania).
  manual     Usuwa wszystkie skrypty ręczne.
  all        Wykonuje wszystkie powyższe.

Przykłady:
  psa reset found
  psa reset all
        """,
    )
    p.add_argument(
        "cel",
        metavar="CEL",
        choices=["found", "dequeued", "manual", "all"],
        help="Co usunąć: found | dequeued | manual | all",
    )
    p.set_defaults(func=run)
