"""Wspólne pomocnicze dla komend psa: wczytywanie JSON, formatowanie dat i rozmiarów."""

from __future__ import annotations

import datetime as dt
import json
import pathlib
from typing import Any

from rich.console import Console

from catalog import CatalogCorruptError, Catalogs
from data_model import CatalogName

console = Console(width=200)

CATALOG_CHOICES = [c.label for c in CatalogName]


def fail(what: str, e: Exception | str) -> None:
    console.print(f"[red]Błąd {what}:[/red] {e}")
    raise SystemExit(1)


def read_json(path: pathlib.Path, what: str) -> Any:
    if not path.exists():
        fail(what, f"brak pliku {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        fail(what, f"{path.name}: {e}")


def fmt_epoch(epoch: Any) -> str:
    if not isinstance(epoch, (int, float)) or isinstance(epoch, bool) or not epoch:
        return "—"
    return dt.datetime.fromtimestamp(epoch).strftime("%Y-%m-%d %H:%M")


def fmt_size(size: Any) -> str:
    if not isinstance(size, int) or isinstance(size, bool):
        return "—"
    if size < 1024:
        return f"{size} B"
    return f"{size / 1024:.1f} KB"


def load_raw_or_fail(catalogs: Catalogs, name: CatalogName) -> dict[str, dict[str, Any]]:
    try:
        return catalogs.records(name)
    except CatalogCorruptError as e:
        fail("katalogu", e)
