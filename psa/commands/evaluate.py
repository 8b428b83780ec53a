"""Komenda: psa evaluate — werdykt zestawu reguł dla kontekstu żądania."""

from __future__ import annotations

import argparse
import json
import pathlib

from rich.table import Table
from rich import box
from rich.text import Text

from catalog import format_rule_set
from data_model import RuleSet
from matcher import build_default_registry, load_context_json, load_rules_json, evaluate_condition
from pipeline import addition_matcher, removal_matcher
from psa._common import console, fail


def _conditions_table(rules: RuleSet, ctx, registry) -> Table:
    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True,
                  row_styles=["", "dim"])
    table.add_column("WARUNEK",  style="bold", no_wrap=True)
    table.add_column("ARGUMENT", no_wrap=True)
    table.add_column("WYNIK",    justify="center", no_wrap=True)

    for key, argument in rules:
        predicate = registry.resolve(key.predicate)
        if predicate is None:
            result = Text("nieznany", style="yellow")
        else:
            ok = evaluate_condition(predicate, key, argument, ctx)
            result = Text("PRAWDA", style="green") if ok else Text("FAŁSZ", style="red")
        table.add_row(key.display, json.dumps(argument, ensure_ascii=False), result)
    return table


def run(args: argparse.Namespace) -> None:
    try:
        ctx = load_context_json(pathlib.Path(args.context))
        rules = load_rules_json(pathlib.Path(args.rules)) if args.rules else None
    except (OSError, ValueError) as e:
        fail("wczytywania", e)

    registry = build_default_registry()
    matcher = removal_matcher(registry) if args.default == "removal" else addition_matcher(registry)
    verdict = matcher.matches(rules, ctx)

    if rules is None:
        console.print(f"Reguły: [dim]brak — werdykt domyślny ({args.default})[/dim]")
    else:
        console.print(f"Reguły: [magenta]{format_rule_set(rules) or '(puste)'}[/magenta]")
        if not rules.is_empty():
            console.print(_conditions_table(rules, ctx, registry))

    console.print(
        "Werdykt: [green bold]PASUJE[/green bold]" if verdict
        else "Werdykt: [red bold]NIE PASUJE[/red bold]"
    )
    if args.exit_code and not verdict:
        raise SystemExit(2)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "evaluate",
        help="Werdykt zestawu reguł dla kontekstu z pliku JSON.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Ewaluuje zestaw reguł (format przewodowy) względem kontekstu żądania.
Bez --rules ewaluowany jest brak reguł (werdykt domyślny).

Werdykt domyślny:
  removal   – tylko front-end (skrypty usuwane)
  addition  – zawsze (skrypty ręczne)

Przykłady:
  psa evaluate --rules rules.json --context ctx.json
  psa evaluate --context admin.json --default removal
        """,
    )
    p.add_argument("--rules", "-r", metavar="PLIK", default=None,
                   help="Plik JSON z regułami (null = brak reguł).")
    p.add_argument("--context", "-c", metavar="PLIK", required=True,
                   help="Plik JSON z kontekstem żądania.")
    p.add_argument("--default", choices=["removal", "addition"], default="removal",
                   help="Werdykt dla braku reguł (domyślnie removal).")
    p.add_argument("--exit-code", action="store_true",
                   help="Kod wyjścia 2 gdy reguły nie pasują.")
    p.set_defaults(func=run)
