"""Komenda: psa rules — reguły skryptu usuwanego lub ręcznego."""

from __future__ import annotations

import argparse
import json
import pathlib

from rich.table import Table
from rich import box

from catalog import (
    CatalogCorruptError,
    InvalidRuleSetError,
    UnknownHandleError,
    clear_rules,
    format_rule_set,
    get_rules,
    set_rules,
)
from data_model import CatalogName, RuleSet
from matcher import build_default_registry
from psa._common import console, fail, read_json
from psa._db import get_connection, open_catalogs
from validator import RuleSetValidator, ValidationReport


def print_report(report: ValidationReport) -> None:
    """Tabela błędów i ostrzeżeń walidacji."""
    if report.errors:
        table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
        table.add_column("KOD",       style="red", no_wrap=True)
        table.add_column("ŚCIEŻKA",   style="cyan", no_wrap=True)
        table.add_column("KOMUNIKAT", no_wrap=False, max_width=60)
        table.add_column("NAPRAWA",   style="dim", no_wrap=False, max_width=50)
        for e in report.errors:
            table.add_row(str(e.code), e.path, e.message, e.expected_fix)
        console.print(table)
    for w in report.warnings:
        console.print(f"[yellow]Ostrzeżenie:[/yellow] {w}")


def _payload(args: argparse.Namespace) -> object:
    if args.file:
        return read_json(pathlib.Path(args.file), "pliku reguł")
    if args.json is None:
        fail("argumentów", "podaj --json lub --file")
    try:
        return json.loads(args.json)
    except json.JSONDecodeError as e:
        fail("JSON", e)


def _show(rules: RuleSet | None, handle: str) -> None:
    if rules is None:
        console.print(f"[bold]{handle}[/bold]: [dim]brak reguł — werdykt domyślny[/dim]")
        return
    console.print(f"[bold]{handle}[/bold]: [magenta]{format_rule_set(rules) or '(puste — nigdy nie pasuje)'}[/magenta]")
    console.print_json(json.dumps(rules.to_wire(), ensure_ascii=False))


def run(args: argparse.Namespace) -> None:
    name = CatalogName.from_label(args.catalog)

    payload = _payload(args) if args.akcja == "set" else None

    try:
        conn = get_connection()
    except Exception as e:
        fail("połączenia z bazą", e)

    catalogs = open_catalogs(conn)
    try:
        if args.akcja == "show":
            _show(get_rules(catalogs, name, args.handle), args.handle)
        elif args.akcja == "set":
            validator = RuleSetValidator(build_default_registry())
            rules = set_rules(catalogs, name, args.handle, payload, validator)
            console.print(f"[green]Zapisano reguły:[/green] {format_rule_set(rules)}")
            print_report(validator.validate(payload))
        elif args.akcja == "clear":
            clear_rules(catalogs, name, args.handle)
            console.print(f"[green]Usunięto reguły[/green] [bold]{args.handle}[/bold] — werdykt domyślny")
    except InvalidRuleSetError as e:
        print_report(e.report)
        fail("walidacji reguł", f"{len(e.report.errors)} błąd(ów)")
    except (UnknownHandleError, CatalogCorruptError) as e:
        fail("katalogu", e)
    finally:
        conn.close()


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "rules",
        help="Pokazuje, zapisuje lub czyści reguły skryptu.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Reguły skryptu z katalogu dequeued (kiedy usuwać) lub manual (kiedy dodawać).

Akcje:
  show    Pokazuje reguły w formacie przewodowym i czytelnym.
  set     Waliduje i zapisuje reguły (--json lub --file).
  clear   Usuwa reguły — skrypt wraca do werdyktu domyślnego
          (dequeued: tylko front-end, manual: zawsze).

Format reguł:
  {"is_singular": "post", "__neg:is_user_logged_in": true, "__mode": "all"}

Przykłady:
  psa rules show dequeued jquery-migrate
  psa rules set dequeued jquery-migrate --json '{"is_front_page": true}'
  psa rules set manual my-widget --file rules.json
  psa rules clear manual my-widget
        """,
    )
    p.add_argument("akcja", choices=["show", "set", "clear"], metavar="AKCJA",
                   help="show | set | clear")
    p.add_argument("catalog", choices=["dequeued", "manual"], metavar="KATALOG",
                   help="dequeued | manual")
    p.add_argument("handle", metavar="HANDLE", help="Handle skryptu.")
    p.add_argument("--json", metavar="JSON", default=None, help="Reguły jako napis JSON.")
    p.add_argument("--file", "-f", metavar="PLIK", default=None, help="Plik JSON z regułami.")
    p.set_defaults(func=run)
