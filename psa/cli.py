"""
psa — narzędzie CLI dla Script Audit.

Użycie:
  psa [--verbose] <komenda> [opcje]

Komendy:
  scripts       Listuje skrypty w katalogu (found / dequeued / manual).
  dequeue       Przenosi odkryte skrypty do usuwanych (reguła: tylko front-end).
  restore       Usuwa skrypty z listy usuwanych.
  forget        Usuwa wpisy z katalogu odkrytych.
  reset         Czyści cały katalog (found / dequeued / manual / all).
  rules         Pokazuje, zapisuje lub czyści reguły skryptu.
  manual        Dodaje, edytuje lub usuwa skrypty ręczne.
  evaluate      Werdykt zestawu reguł dla kontekstu z pliku JSON.
  simulate      Pełny przebieg renderowania dla kolejki i kontekstu z JSON.
  crawl         Odkrywa skrypty ze strony pod podanym adresem.
  predicates    Listuje wbudowane predykaty.
  apply-schema  Aplikuje db/schema.sql do bazy danych (idempotentne).
"""

from __future__ import annotations

import argparse
import logging
import sys

from rich.logging import RichHandler

# Windows: terminal może używać cp1252, wymuszamy UTF-8, żeby polskie znaki
# w tekstach pomocy argparse były wypisywane poprawnie.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from psa.commands import scripts as cmd_scripts
from psa.commands import dequeue as cmd_dequeue
from psa.commands import restore as cmd_restore
from psa.commands import forget as cmd_forget
from psa.commands import reset as cmd_reset
from psa.commands import rules as cmd_rules
from psa.commands import manual as cmd_manual
from psa.commands import evaluate as cmd_evaluate
from psa.commands import simulate as cmd_simulate
from psa.commands import crawl as cmd_crawl
from psa.commands import predicates as cmd_predicates
from psa.commands import apply_schema as cmd_apply_schema


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psa",
        description="Script Audit — narzędzie CLI.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version="psa 0.1.0"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Logi diagnostyczne (DEBUG).",
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_scripts.add_parser(subparsers)
    cmd_dequeue.add_parser(subparsers)
    cmd_restore.add_parser(subparsers)
    cmd_forget.add_parser(subparsers)
    cmd_reset.add_parser(subparsers)
    cmd_rules.add_parser(subparsers)
    cmd_manual.add_parser(subparsers)
    cmd_evaluate.add_parser(subparsers)
    cmd_simulate.add_parser(subparsers)
    cmd_crawl.add_parser(subparsers)
    cmd_predicates.add_parser(subparsers)
    cmd_apply_schema.add_parser(subparsers)

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
