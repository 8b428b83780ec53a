"""Komenda: psa manual — skrypty dodawane ręcznie."""

from __future__ import annotations

import argparse
from typing import Any

from catalog import (
    CatalogCorruptError,
    DuplicateHandleError,
    InvalidRuleSetError,
    UnknownHandleError,
    register_manual,
    remove_manual,
    update_manual,
)
from psa._common import console, fail
from psa._db import get_connection, open_catalogs
from psa.commands.rules import print_report


def _fields(args: argparse.Namespace) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for key in ("src", "ver", "deps", "strategy"):
        value = getattr(args, key, None)
        if value is not None:
            fields[key] = value
    if args.footer is not None:
        fields["in_footer"] = args.footer
    return fields


def run(args: argparse.Namespace) -> None:
    try:
        conn = get_connection()
    except Exception as e:
        fail("połączenia z bazą", e)

    catalogs = open_catalogs(conn)
    try:
        if args.akcja == "add":
            if not args.src:
                fail("argumentów", "--src jest wymagane przy dodawaniu")
            handle = register_manual(catalogs, {"handle": args.handles[0], **_fields(args)})
            console.print(f"[green]Dodano skrypt ręczny:[/green] [bold]{handle}[/bold] (ładowany zawsze, dopóki nie ustawisz reguł)")
        elif args.akcja == "update":
            record = update_manual(catalogs, args.handles[0], **_fields(args))
            console.print(f"[green]Zaktualizowano:[/green] [bold]{args.handles[0]}[/bold] → {record['src']}")
        elif args.akcja == "remove":
            removed = remove_manual(catalogs, args.handles)
            console.print(f"[green]Usunięto {len(removed)} skrypt(ów) ręcznych[/green]")
    except InvalidRuleSetError as e:
        print_report(e.report)
        fail("walidacji skryptu", f"{len(e.report.errors)} błąd(ów)")
    except (DuplicateHandleError, UnknownHandleError, CatalogCorruptError, ValueError) as e:
        fail("skryptu ręcznego", e)
    finally:
        conn.close()

    console.print("[dim]Gotowe.[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "manual",
        help="Dodaje, edytuje lub usuwa skrypty ręczne.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Skrypty dodane ręcznie są rejestrowane i wstrzykiwane do kolejki strony,
gdy ich reguły pasują. Nowy skrypt nie ma reguł — ładuje się wszędzie.

Akcje:
  add HANDLE --src URL [--ver V] [--deps "a, b"] [--footer] [--strategy S]
  update HANDLE [--src URL] [--ver V] [--deps "a, b"] [--footer|--header] [--strategy S]
  remove HANDLE [HANDLE ...]

Przykłady:
  psa manual add my-widget --src https://cdn.example.com/w.js --deps jquery --footer
  psa manual update my-widget --strategy defer
  psa manual remove my-widget
        """,
    )
    p.add_argument("akcja", choices=["add", "update", "remove"], metavar="AKCJA",
                   help="add | update | remove")
    p.add_argument("handles", nargs="+", metavar="HANDLE", help="Handle skryptu.")
    p.add_argument("--src", default=None, help="Pełny adres URL skryptu.")
    p.add_argument("--ver", default=None, help="Wersja (parametr ver).")
    p.add_argument("--deps", default=None, help="Zależności rozdzielone przecinkami.")
    p.add_argument("--strategy", choices=["none", "async", "defer"], default=None,
                   help="Strategia ładowania.")
    pos = p.add_mutually_exclusive_group()
    pos.add_argument("--footer", dest="footer", action="store_true", default=None,
                     help="Ładuj w stopce.")
    pos.add_argument("--header", dest="footer", action="store_false",
                     help="Ładuj w nagłówku.")
    p.set_defaults(func=run)
