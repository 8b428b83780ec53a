"""Komenda: psa scripts — listowanie skryptów w katalogu."""

from __future__ import annotations

import argparse

from rich.table import Table
from rich import box
from rich.text import Text

from catalog import format_rule_set
from data_model import CatalogName, ManagedScript, parse_dependencies
from psa._common import CATALOG_CHOICES, console, fail, fmt_epoch, fmt_size, load_raw_or_fail
from psa._db import get_connection, open_catalogs

# Klucz daty pokazywanej w kolumnie DATE
DATE_KEY: dict[CatalogName, str] = {
    CatalogName.DISCOVERED: "found",
    CatalogName.REMOVED:    "dequeued",
    CatalogName.MANUAL:     "added_on",
}

STRATEGY_STYLE: dict[str, str] = {
    "async": "cyan",
    "defer": "yellow",
    "none":  "dim white",
}


def _deps_text(deps: object) -> str:
    return ", ".join(parse_dependencies(deps))


def run(args: argparse.Namespace) -> None:
    name = CatalogName.from_label(args.catalog)

    try:
        conn = get_connection()
    except Exception as e:
        fail("połączenia z bazą", e)

    with conn:
        records = load_raw_or_fail(open_catalogs(conn), name)
    conn.close()

    if args.pos:
        want_footer = args.pos == "footer"
        records = {h: r for h, r in records.items() if bool(r.get("in_footer")) == want_footer}

    if not records:
        console.print(f"[yellow]Katalog [bold]{name.label}[/bold] jest pusty.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("HANDLE",   style="bold", no_wrap=True)
    table.add_column("SRC",      no_wrap=False, max_width=60)
    table.add_column("VER",      no_wrap=True)
    table.add_column("POS",      no_wrap=True)
    table.add_column("STRATEGY", no_wrap=True)
    table.add_column("DEPS",     no_wrap=False, max_width=30)
    if name == CatalogName.DISCOVERED:
        table.add_column("SIZE",  justify="right", no_wrap=True)
        table.add_column("MTIME", no_wrap=True)
    table.add_column("DATE",     no_wrap=True)
    if name != CatalogName.DISCOVERED:
        table.add_column("RULES", no_wrap=False, max_width=50)

    for handle in sorted(records):
        r = records[handle]
        strategy = str(r.get("strategy") or "none")
        row: list[str | Text] = [
            handle,
            str(r.get("src") or ""),
            str(r.get("ver") or "—"),
            "footer" if r.get("in_footer") else "header",
            Text(strategy, style=STRATEGY_STYLE.get(strategy, "")),
            _deps_text(r.get("deps")),
        ]
        if name == CatalogName.DISCOVERED:
            row += [fmt_size(r.get("size")), fmt_epoch(r.get("mtime"))]
        row.append(fmt_epoch(r.get(DATE_KEY[name])))
        if name != CatalogName.DISCOVERED:
            rules = ManagedScript.from_record(handle, r, name).rules
            row.append(
                Text("(brak — domyślne)", style="dim") if rules is None
                else Text(format_rule_set(rules) or "(puste — nigdy)", style="magenta")
            )
        table.add_row(*row)

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(records)} skrypt(ów) w katalogu {name.label}[/dim]\n")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "scripts",
        help="Listuje skrypty w katalogu.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Listuje skrypty zapisane w jednym z trzech katalogów.

Katalogi:
  found     – skrypty odkryte w kolejce renderowania
  dequeued  – skrypty warunkowo usuwane z kolejki
  manual    – skrypty dodane ręcznie, warunkowo wstrzykiwane

Przykłady:
  psa scripts
  psa scripts found --pos footer
  psa scripts dequeued
        """,
    )
    p.add_argument(
        "catalog",
        nargs="?",
        default="found",
        choices=CATALOG_CHOICES,
        metavar="KATALOG",
        help="found | dequeued | manual (domyślnie found)",
    )
    p.add_argument(
        "--pos",
        choices=["header", "footer"],
        help="Filtruj po położeniu skryptu.",
    )
    p.set_defaults(func=run)
