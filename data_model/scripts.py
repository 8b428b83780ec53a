"""
Struktury danych dla rekordów skryptów w katalogach.

Kształt rekordu w magazynie (klucz słownika = handle):
  found:    src, ver, deps, in_footer, strategy, size, mtime, found
  dequeued: jak found + dequeued, rules?
  manual:   src, ver, deps ("a, b"), in_footer, strategy, rules?, added_on, updated_on?

Pole rules:
  brak / null → ABSENT
  []          → ABSENT (zapis pustej tablicy z poprzedniej wersji magazynu)
  {...}       → RuleSet.from_wire()
  inne        → pusty RuleSet (nigdy nie pasuje)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .common import CatalogName, Handle, LoadStrategy
from .rules import RuleSet


# ---------------------------------------------------------------------------
# Pomocnicze
# ---------------------------------------------------------------------------

def parse_dependencies(raw: object) -> list[str]:
    """
    Zamienia zależności na listę handle'i.

    "jquery, , lodash " → ["jquery", "lodash"]; lista jest tylko trimowana.
    """
    if isinstance(raw, str):
        parts = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        parts = [p for p in raw if isinstance(p, str)]
    else:
        return []
    return [p.strip() for p in parts if p.strip()]


def _opt_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    return None


def _rules_from_record(record: dict[str, Any]) -> RuleSet | None:
    raw = record.get("rules")
    if raw is None:
        return None
    if isinstance(raw, list) and not raw:
        return None
    if isinstance(raw, dict):
        return RuleSet.from_wire(raw)
    return RuleSet()


def _require_mapping(handle: Handle, record: object) -> dict[str, Any]:
    if not isinstance(record, dict):
        raise ValueError(
            f"Rekord skryptu '{handle}' nie jest obiektem (otrzymano {type(record).__name__})"
        )
    return record


# ---------------------------------------------------------------------------
# ScriptEntry: wpis katalogu odkrytych
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ScriptEntry:
    """
    Skrypt zaobserwowany w kolejce renderowania.

    - size, mtime: tylko dla plików lokalnych; None gdy nie da się odczytać
    - found:       epoch pierwszego zaobserwowania
    """
    handle: Handle
    src: str
    version: str | None = None
    deps: list[str] = field(default_factory=list)
    in_footer: bool = False
    strategy: LoadStrategy = LoadStrategy.NONE
    size: int | None = None
    mtime: int | None = None
    found: int = 0

    def to_record(self) -> dict[str, Any]:
        return {
            "src":       self.src,
            "ver":       self.version if self.version is not None else "",
            "deps":      list(self.deps),
            "in_footer": self.in_footer,
            "strategy":  str(self.strategy),
            "size":      self.size,
            "mtime":     self.mtime,
            "found":     self.found,
        }

    @classmethod
    def from_record(cls, handle: Handle, record: object) -> "ScriptEntry":
        r = _require_mapping(handle, record)
        ver = r.get("ver")
        return cls(
            handle=handle,
            src=str(r.get("src") or ""),
            version=str(ver) if ver not in (None, "", False) else None,
            deps=parse_dependencies(r.get("deps")),
            in_footer=bool(r.get("in_footer", False)),
            strategy=LoadStrategy.coerce(r.get("strategy")),
            size=_opt_int(r.get("size")),
            mtime=_opt_int(r.get("mtime")),
            found=_opt_int(r.get("found")) or 0,
        )


# ---------------------------------------------------------------------------
# ManagedScript: rekord katalogu usuwanych lub ręcznych
# ---------------------------------------------------------------------------

# Klucz znacznika czasu przejścia do katalogu
TRANSITION_KEY: dict[CatalogName, str] = {
    CatalogName.REMOVED: "dequeued",
    CatalogName.MANUAL:  "added_on",
}


@dataclass(slots=True)
class ManagedScript:
    """
    Rekord skryptu zarządzanego regułami.

    - deps:       dla katalogu manual napis "a, b" (tak jak zapisał operator),
                  dla katalogu removed lista skopiowana z wpisu odkrytego
    - rules:      RuleSet albo None (ABSENT)
    - transition: epoch przeniesienia / dodania (dequeued lub added_on)
    - extra:      pozostałe pola rekordu (size, mtime, found, updated_on …)
    """
    handle: Handle
    catalog: CatalogName
    src: str
    version: str | None = None
    deps: str | list[str] = ""
    in_footer: bool = False
    strategy: LoadStrategy = LoadStrategy.NONE
    rules: RuleSet | None = None
    transition: int = 0
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def dependency_list(self) -> list[str]:
        return parse_dependencies(self.deps)

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = dict(self.extra)
        record.update({
            "src":       self.src,
            "ver":       self.version,
            "deps":      self.deps if isinstance(self.deps, str) else list(self.deps),
            "in_footer": self.in_footer,
            "strategy":  str(self.strategy),
            TRANSITION_KEY[self.catalog]: self.transition,
        })
        if self.rules is not None:
            record["rules"] = self.rules.to_wire()
        else:
            record.pop("rules", None)
        return record

    @classmethod
    def from_record(
        cls,
        handle: Handle,
        record: object,
        catalog: CatalogName,
    ) -> "ManagedScript":
        r = _require_mapping(handle, record)
        known = {"src", "ver", "deps", "in_footer", "strategy", "rules", TRANSITION_KEY[catalog]}
        ver = r.get("ver")
        deps = r.get("deps", "")
        return cls(
            handle=handle,
            catalog=catalog,
            src=str(r.get("src") or ""),
            version=str(ver) if ver not in (None, "", False) else None,
            deps=deps if isinstance(deps, str) else parse_dependencies(deps),
            in_footer=bool(r.get("in_footer", False)),
            strategy=LoadStrategy.coerce(r.get("strategy")),
            rules=_rules_from_record(r),
            transition=_opt_int(r.get(TRANSITION_KEY[catalog])) or 0,
            extra={k: v for k, v in r.items() if k not in known},
        )
