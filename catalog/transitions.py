"""
catalog/transitions.py — operacje operatora na katalogach.

Każda operacja czyta pełne mapy katalogów i zapisuje je z powrotem.

  dequeue(catalogs, handles)                 found → dequeued (+ domyślne reguły)
  restore(catalogs, handles)                 usunięcie z dequeued
  forget(catalogs, handles)                  usunięcie z found
  clear_discovered(catalogs)                 usunięcie całego katalogu found
  register_manual(catalogs, data, queue)     nowy skrypt ręczny
  update_manual(catalogs, handle, **fields)  edycja metadanych skryptu ręcznego
  remove_manual(catalogs, handles)           usunięcie skryptów ręcznych
  get_rules / set_rules / clear_rules        reguły skryptu zarządzanego
  format_rule_set(rules)                     opis reguł dla człowieka
"""

from __future__ import annotations

import logging
import time
from typing import Any, Iterable

from data_model import CatalogName, Handle, ManagedScript, RuleSet
from matcher import FRONTEND_PREDICATE
from validator import RuleSetValidator, ValidationReport, validate_manual_script

from .catalogs import Catalogs

logger = logging.getLogger(__name__)

# Pola rekordu skryptu ręcznego edytowalne przez operatora
MANUAL_FIELDS = ("src", "ver", "deps", "in_footer", "strategy")


# ---------------------------------------------------------------------------
# Wyjątki
# ---------------------------------------------------------------------------

class UnknownHandleError(KeyError):
    """Handle nie istnieje we wskazanym katalogu."""

    def __init__(self, handle: Handle, catalog: CatalogName) -> None:
        self.handle = handle
        self.catalog = catalog
        super().__init__(handle)

    def __str__(self) -> str:
        return f"Skrypt '{self.handle}' nie istnieje w katalogu '{self.catalog.label}'"


class DuplicateHandleError(ValueError):
    """Handle jest już w którymś katalogu albo zarejestrowany w kolejce."""

    def __init__(self, handle: Handle, where: str) -> None:
        self.handle = handle
        super().__init__(f"Skrypt '{handle}' już istnieje ({where})")


class InvalidRuleSetError(ValueError):
    """Odrzucony zestaw reguł lub rekord skryptu; report zawiera szczegóły."""

    def __init__(self, report: ValidationReport) -> None:
        self.report = report
        details = "; ".join(f"{e.path}: {e.message}" for e in report.errors)
        super().__init__(f"Nieprawidłowe dane: {details}")


def _now(now: int | None) -> int:
    return now if now is not None else int(time.time())


def _require_managed(catalog: CatalogName) -> None:
    if catalog == CatalogName.DISCOVERED:
        raise ValueError("Reguły mają tylko skrypty usuwane i ręczne")


def default_rules() -> dict[str, Any]:
    """Reguły nadawane przy przeniesieniu do usuwanych: tylko front-end."""
    return {FRONTEND_PREDICATE: True}


# ---------------------------------------------------------------------------
# found ↔ dequeued
# ---------------------------------------------------------------------------

def dequeue(
    catalogs: Catalogs,
    handles: Iterable[Handle],
    *,
    now: int | None = None,
) -> list[Handle]:
    """Przenosi odkryte skrypty do usuwanych. Nieznane handle'e są pomijane."""
    found = catalogs.raw(CatalogName.DISCOVERED)
    removed = catalogs.raw(CatalogName.REMOVED)
    stamp = _now(now)
    moved: list[Handle] = []

    for handle in handles:
        if not isinstance(found.get(handle), dict):
            continue
        record = dict(found.pop(handle))
        record["dequeued"] = stamp
        record["rules"] = default_rules()
        removed[handle] = record
        moved.append(handle)
        logger.debug("Przeniesiono %s do usuwanych", handle)

    if moved:
        catalogs.write(CatalogName.DISCOVERED, found)
        catalogs.write(CatalogName.REMOVED, removed)
    return moved


def _delete_from(catalogs: Catalogs, name: CatalogName, handles: Iterable[Handle]) -> list[Handle]:
    records = catalogs.raw(name)
    deleted = [h for h in dict.fromkeys(handles) if records.pop(h, None) is not None]
    if deleted:
        catalogs.write(name, records)
    return deleted


def restore(catalogs: Catalogs, handles: Iterable[Handle]) -> list[Handle]:
    """Usuwa skrypty z listy usuwanych; crawler może je odkryć ponownie."""
    return _delete_from(catalogs, CatalogName.REMOVED, handles)


def forget(catalogs: Catalogs, handles: Iterable[Handle]) -> list[Handle]:
    return _delete_from(catalogs, CatalogName.DISCOVERED, handles)


def clear_discovered(catalogs: Catalogs) -> None:
    catalogs.drop(CatalogName.DISCOVERED)


# ---------------------------------------------------------------------------
# Skrypty ręczne
# ---------------------------------------------------------------------------

def register_manual(
    catalogs: Catalogs,
    data: dict[str, Any],
    queue: Any = None,
    *,
    now: int | None = None,
) -> Handle:
    """
    Dodaje skrypt ręczny.

    Rekord nie ma pola rules, więc skrypt ładuje się wszędzie,
    dopóki operator nie zapisze reguł.

    Raises:
        InvalidRuleSetError:  niepoprawny handle, src, deps lub strategy
        DuplicateHandleError: handle w dowolnym katalogu lub w kolejce
    """
    report = validate_manual_script(data)
    if not report.is_valid:
        raise InvalidRuleSetError(report)
    record = report.normalized
    handle = record["handle"]

    owner = catalogs.owner_of(handle)
    if owner is not None:
        raise DuplicateHandleError(handle, f"katalog '{owner.label}'")
    if queue is not None and queue.has(handle):
        raise DuplicateHandleError(handle, "zarejestrowany w kolejce")

    manual = catalogs.raw(CatalogName.MANUAL)
    manual[handle] = {
        **{k: record[k] for k in MANUAL_FIELDS if k in record},
        "added_on": _now(now),
    }
    catalogs.write(CatalogName.MANUAL, manual)
    logger.debug("Dodano skrypt ręczny %s", handle)
    return handle


def update_manual(
    catalogs: Catalogs,
    handle: Handle,
    *,
    now: int | None = None,
    **fields: Any,
) -> dict[str, Any]:
    """
    Zmienia metadane skryptu ręcznego; rules i added_on są zachowane.

    Raises:
        UnknownHandleError, InvalidRuleSetError, ValueError (nieznane pole)
    """
    unknown = set(fields) - set(MANUAL_FIELDS)
    if unknown:
        raise ValueError(f"Nieznane pola skryptu: {', '.join(sorted(unknown))}")

    manual = catalogs.raw(CatalogName.MANUAL)
    if not isinstance(manual.get(handle), dict):
        raise UnknownHandleError(handle, CatalogName.MANUAL)
    current = manual[handle]

    merged = {k: current.get(k) for k in MANUAL_FIELDS if k in current}
    merged.update(fields)
    merged["handle"] = handle
    report = validate_manual_script(merged)
    if not report.is_valid:
        raise InvalidRuleSetError(report)

    record = {k: report.normalized[k] for k in MANUAL_FIELDS if k in report.normalized}
    if "rules" in current:
        record["rules"] = current["rules"]
    record["added_on"] = current.get("added_on", _now(now))
    record["updated_on"] = _now(now)
    manual[handle] = record
    catalogs.write(CatalogName.MANUAL, manual)
    return record


def remove_manual(catalogs: Catalogs, handles: Iterable[Handle]) -> list[Handle]:
    return _delete_from(catalogs, CatalogName.MANUAL, handles)


# ---------------------------------------------------------------------------
# Reguły
# ---------------------------------------------------------------------------

def _managed_record(catalogs: Catalogs, catalog: CatalogName, handle: Handle):
    _require_managed(catalog)
    records = catalogs.raw(catalog)
    if not isinstance(records.get(handle), dict):
        raise UnknownHandleError(handle, catalog)
    return records


def get_rules(catalogs: Catalogs, catalog: CatalogName, handle: Handle) -> RuleSet | None:
    records = _managed_record(catalogs, catalog, handle)
    return ManagedScript.from_record(handle, records[handle], catalog).rules


def set_rules(
    catalogs: Catalogs,
    catalog: CatalogName,
    handle: Handle,
    payload: Any,
    validator: RuleSetValidator,
) -> RuleSet:
    """
    Zapisuje reguły skryptu w formacie przewodowym.

    Raises:
        UnknownHandleError, InvalidRuleSetError
    """
    records = _managed_record(catalogs, catalog, handle)
    report = validator.validate(payload)
    if not report.is_valid:
        raise InvalidRuleSetError(report)
    rules = RuleSet.from_wire(report.normalized)
    records[handle]["rules"] = rules.to_wire()
    catalogs.write(catalog, records)
    logger.debug("Zapisano reguły %s/%s: %s", catalog.label, handle, rules.describe())
    return rules


def clear_rules(catalogs: Catalogs, catalog: CatalogName, handle: Handle) -> None:
    """Usuwa pole rules; rekord wraca do werdyktu domyślnego."""
    records = _managed_record(catalogs, catalog, handle)
    records[handle].pop("rules", None)
    catalogs.write(catalog, records)


def format_rule_set(rules: RuleSet | None) -> str:
    if rules is None:
        return ""
    return rules.describe()
