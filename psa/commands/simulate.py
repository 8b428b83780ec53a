"""Komenda: psa simulate — pełny przebieg renderowania strony."""

from __future__ import annotations

import argparse
import json
import pathlib
from typing import Any

from rich.table import Table
from rich import box
from rich.text import Text

from catalog import CatalogCorruptError, Catalogs, MemoryOptionStore, SiteLayout
from data_model import CatalogName
from matcher import build_default_registry, load_context_json
from pipeline import ScriptQueue, run_render_pass
from psa._common import console, fail, read_json
from psa._db import get_connection, open_catalogs


def _state_store(raw: Any) -> MemoryOptionStore:
    """Plik stanu: {"found": {...}, "dequeued": {...}, "manual": {...}} lub nazwy opcji."""
    if not isinstance(raw, dict):
        fail("pliku stanu", "oczekiwano obiektu JSON")
    data: dict[str, Any] = {}
    for key, value in raw.items():
        try:
            name = CatalogName(key)
        except ValueError:
            try:
                name = CatalogName.from_label(key)
            except ValueError as e:
                fail("pliku stanu", e)
        data[name.value] = value
    return MemoryOptionStore(data)


def _snapshot(catalogs: Catalogs) -> MemoryOptionStore:
    return MemoryOptionStore({name.value: catalogs.raw(name) for name in CatalogName})


def _queue_table(queue: ScriptQueue, added: set[str], discovered: set[str]) -> Table:
    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True,
                  row_styles=["", "dim"])
    table.add_column("HANDLE",   style="bold", no_wrap=True)
    table.add_column("SRC",      no_wrap=False, max_width=60)
    table.add_column("POS",      no_wrap=True)
    table.add_column("STRATEGY", no_wrap=True)
    table.add_column("STATUS",   no_wrap=True)

    for handle in queue.queued():
        script = queue.registered(handle)
        if handle in added:
            status = Text("dodany", style="green")
        elif handle in discovered:
            status = Text("odkryty", style="cyan")
        else:
            status = Text("")
        table.add_row(
            handle,
            script.src if script else "",
            "footer" if script and script.in_footer else "header",
            str(script.strategy) if script else "",
            status,
        )
    return table


def run(args: argparse.Namespace) -> None:
    items = read_json(pathlib.Path(args.queue), "pliku kolejki")
    if not isinstance(items, list):
        fail("pliku kolejki", "oczekiwano listy")
    try:
        queue = ScriptQueue.from_items(items)
        ctx = load_context_json(pathlib.Path(args.context))
    except (OSError, ValueError) as e:
        fail("wczytywania", e)

    conn = None
    state_path = pathlib.Path(args.state) if args.state else None
    if state_path is not None:
        catalogs = Catalogs(_state_store(read_json(state_path, "pliku stanu")))
    else:
        try:
            conn = get_connection()
        except Exception as e:
            fail("połączenia z bazą", e)
        catalogs = open_catalogs(conn)
        if not args.persist:
            catalogs = Catalogs(_snapshot(catalogs))

    try:
        report = run_render_pass(
            catalogs, ctx, queue, build_default_registry(),
            layout=SiteLayout.from_env(),
            discover=not args.no_discover,
        )
    except CatalogCorruptError as e:
        fail("katalogu", e)
    finally:
        if conn is not None:
            conn.close()

    if state_path is not None and args.persist:
        state = {name.label: catalogs.raw(name) for name in CatalogName}
        state_path.write_text(json.dumps(state, ensure_ascii=False, indent=2), encoding="utf-8")

    console.print()
    console.print(_queue_table(queue, set(report.added), set(report.discovered)))
    for handle in report.removed:
        console.print(f"  [red]usunięty:[/red] {handle}")
    console.print(
        f"  [dim]{len(queue)} w kolejce · dodano {len(report.added)} · "
        f"usunięto {len(report.removed)} · odkryto {len(report.discovered)}"
        f"{'' if args.persist else ' (bez zapisu)'}[/dim]\n"
    )


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "simulate",
        help="Pełny przebieg renderowania dla kolejki i kontekstu z JSON.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Symuluje jedno renderowanie strony: skrypty ręczne → usuwanie → odkrywanie.

Kolejka (--queue) to lista obiektów:
  [{"handle": "jquery", "src": "https://example.com/wp-includes/js/jquery.js",
    "ver": "3.7.1", "deps": [], "in_footer": false, "strategy": "none"}]

Katalogi pochodzą z bazy albo z pliku --state:
  {"found": {...}, "dequeued": {...}, "manual": {...}}

Bez --persist nic nie jest zapisywane (baza jest kopiowana do pamięci).
Odkrywanie działa tylko gdy kontekst ma "can_manage": true i nie jest panelem.

Przykłady:
  psa simulate --queue queue.json --context ctx.json
  psa simulate --queue queue.json --context ctx.json --state state.json --persist
        """,
    )
    p.add_argument("--queue", "-q", metavar="PLIK", required=True, help="Plik JSON z kolejką.")
    p.add_argument("--context", "-c", metavar="PLIK", required=True, help="Plik JSON z kontekstem.")
    p.add_argument("--state", "-s", metavar="PLIK", default=None,
                   help="Plik JSON z katalogami (zamiast bazy).")
    p.add_argument("--persist", action="store_true", help="Zapisz wynik odkrywania.")
    p.add_argument("--no-discover", action="store_true", help="Pomiń odkrywanie.")
    p.set_defaults(func=run)
