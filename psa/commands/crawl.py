"""Komenda: psa crawl — odkrywanie skryptów z wyrenderowanej strony."""

from __future__ import annotations

import argparse

import requests
from rich.table import Table
from rich import box

from catalog import CatalogCorruptError, SiteLayout, crawl_queue
from html_parser.parser import fetch_script_queue
from matcher import RequestContext
from psa._common import console, fail
from psa._db import get_connection, open_catalogs


def run(args: argparse.Namespace) -> None:
    try:
        queue = fetch_script_queue(args.url)
    except requests.RequestException as e:
        fail("pobierania strony", e)

    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True,
                  row_styles=["", "dim"])
    table.add_column("HANDLE",   style="bold", no_wrap=True)
    table.add_column("SRC",      no_wrap=False, max_width=70)
    table.add_column("VER",      no_wrap=True)
    table.add_column("POS",      no_wrap=True)
    table.add_column("STRATEGY", no_wrap=True)
    for handle in queue.queued():
        s = queue.registered(handle)
        table.add_row(handle, s.src, s.version or "—", "footer" if s.in_footer else "header", str(s.strategy))
    console.print()
    console.print(table)

    if args.dry_run:
        console.print(f"  [dim]{len(queue)} skrypt(ów) — bez zapisu (--dry-run)[/dim]\n")
        return

    layout = SiteLayout.from_env()
    if args.site_url:
        layout = SiteLayout(
            site_url=args.site_url.rstrip("/"),
            content_url=f"{args.site_url.rstrip('/')}/wp-content",
            content_dir=layout.content_dir,
            abspath=layout.abspath,
        )

    try:
        conn = get_connection()
    except Exception as e:
        fail("połączenia z bazą", e)

    ctx = RequestContext(can_manage=True, url=args.url)
    try:
        added = crawl_queue(open_catalogs(conn), queue, ctx, layout)
    except CatalogCorruptError as e:
        fail("katalogu", e)
    finally:
        conn.close()

    for handle in added:
        console.print(f"[green]Odkryto:[/green] [bold]{handle}[/bold]")
    console.print(f"  [dim]{len(added)} nowych z {len(queue)} skryptów na stronie[/dim]\n")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "crawl",
        help="Odkrywa skrypty ze strony pod podanym adresem.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Pobiera stronę (timeout 30 s), odczytuje tagi <script src> i zapisuje
nowe skrypty w katalogu found. Skrypty obecne w dowolnym katalogu są pomijane.

  handle    – z atrybutu id="<handle>-js", inaczej z nazwy pliku
  wersja    – z parametru ?ver=
  położenie – footer, gdy tag jest poza <head>

Rozmiar i data modyfikacji są odczytywane dla plików lokalnych
(PSA_SITE_URL, PSA_CONTENT_DIR, PSA_ABSPATH).

Przykłady:
  psa crawl https://example.com/
  psa crawl https://example.com/sklep/ --dry-run
        """,
    )
    p.add_argument("url", metavar="URL", help="Adres strony.")
    p.add_argument("--dry-run", action="store_true", help="Tylko wypisz skrypty, bez zapisu.")
    p.add_argument("--site-url", metavar="URL", default=None,
                   help="Adres główny witryny (zamiast PSA_SITE_URL).")
    p.set_defaults(func=run)
