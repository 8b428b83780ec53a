"""Komenda: psa predicates — listowanie wbudowanych predykatów."""

from __future__ import annotations

import argparse

from rich.table import Table
from rich import box
from rich.text import Text

from data_model import PredicateArity
from matcher import build_default_registry
from psa._common import console

# Kolory per arność
ARITY_STYLE: dict[str, str] = {
    PredicateArity.NONE: "dim white",
    PredicateArity.ONE:  "cyan",
    PredicateArity.MANY: "yellow",
}

# Przykład argumentu w formacie przewodowym
ARITY_EXAMPLE: dict[str, str] = {
    PredicateArity.NONE: "true",
    PredicateArity.ONE:  'true | "post"',
    PredicateArity.MANY: 'true | "x" | ["a", "b"]',
}


def run(args: argparse.Namespace) -> None:
    registry = build_default_registry()
    predicates = [p for p in registry if not args.arity or p.arity in args.arity]
    if args.search:
        needle = args.search.lower()
        predicates = [
            p for p in predicates
            if needle in p.name.lower() or needle in (p.meaning_pl or "").lower()
        ]

    if not predicates:
        console.print("[yellow]Brak predykatów spełniających kryteria.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("PRED",     style="bold", no_wrap=True)
    table.add_column("ARITY",    no_wrap=True)
    table.add_column("MAX",      justify="center", no_wrap=True)
    table.add_column("ARGUMENT", no_wrap=True)
    table.add_column("MEANING",  no_wrap=False, max_width=50)

    for p in sorted(predicates, key=lambda p: (p.arity != PredicateArity.NONE, p.name)):
        table.add_row(
            p.name,
            Text(str(p.arity), style=ARITY_STYLE.get(p.arity, "")),
            str(p.max_args) if p.arity != PredicateArity.NONE else "-",
            ARITY_EXAMPLE[p.arity],
            p.meaning_pl or "",
        )

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(predicates)} predykat(ów) · negacja: klucz \"__neg:<nazwa>\"[/dim]\n")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "predicates",
        help="Listuje wbudowane predykaty.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Listuje predykaty, z których budowane są reguły.

Kolumny:
  PRED      – nazwa (dokładne dopasowanie, z wielkością liter)
  ARITY     – none (bez argumentu) / one (opcjonalny skalar) / many (lista pozycyjna)
  MAX       – maksymalna liczba argumentów
  ARGUMENT  – dopuszczalne wartości w formacie przewodowym
  MEANING   – opis po polsku
        """,
    )
    p.add_argument(
        "--arity", "-a",
        nargs="+",
        metavar="ARITY",
        choices=[a.value for a in PredicateArity],
        help="Filtruj po arności (można podać kilka).",
    )
    p.add_argument(
        "--search", "-s",
        metavar="TEKST",
        help="Szukaj w nazwie lub opisie.",
    )
    p.set_defaults(func=run)
