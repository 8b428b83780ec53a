"""
catalog/catalogs.py — typowany dostęp do trzech katalogów skryptów.

Catalogs czyta i zapisuje pełne mapy handle → rekord. Gdy magazyn zwraca
nie-obiekt zamiast mapy, kończy się to CatalogCorruptError. Pojedynczy
rekord, który nie jest obiektem, jest pomijany w widokach typowanych
(z ostrzeżeniem w logu), żeby nie blokował pozostałych skryptów.

Publiczne API:
  Catalogs(store)
    .raw(name)                 -> dict[str, Any]
    .records(name)             -> dict[str, dict]
    .write(name, records)
    .discovered()              -> dict[str, ScriptEntry]
    .managed(name)             -> dict[str, ManagedScript]
    .owner_of(handle)          -> CatalogName | None
    .all_handles()             -> set[str]
"""

from __future__ import annotations

import logging
from typing import Any

from data_model import CatalogName, Handle, ManagedScript, ScriptEntry

from .store import OptionStore

logger = logging.getLogger(__name__)


class CatalogCorruptError(ValueError):
    """Magazyn zwrócił dane, które nie są mapą rekordów."""

    def __init__(self, name: CatalogName, reason: str) -> None:
        self.catalog = name
        super().__init__(f"Katalog '{name.label}' ({name.value}) jest uszkodzony: {reason}")


class Catalogs:
    def __init__(self, store: OptionStore) -> None:
        self._store = store

    @property
    def store(self) -> OptionStore:
        return self._store

    # ------------------------------------------------------------------
    # Surowe mapy
    # ------------------------------------------------------------------

    def raw(self, name: CatalogName) -> dict[str, Any]:
        """
        Zwraca mapę handle → rekord.

        Brak opcji i pusta tablica (zapis z poprzedniej wersji magazynu)
        oznaczają pusty katalog.

        Raises:
            CatalogCorruptError gdy wartość nie jest mapą.
        """
        value = self._store.get(name.value, None)
        if value is None or (isinstance(value, list) and not value):
            return {}
        if not isinstance(value, dict):
            raise CatalogCorruptError(name, f"oczekiwano obiektu, otrzymano {type(value).__name__}")
        return value

    def records(self, name: CatalogName) -> dict[str, dict[str, Any]]:
        """Jak raw(), ale bez rekordów, które nie są obiektami."""
        out = {}
        for handle, record in self.raw(name).items():
            if not isinstance(record, dict):
                logger.warning(
                    "Pominięto uszkodzony rekord %s/%s (%s)", name.value, handle, type(record).__name__
                )
                continue
            out[handle] = record
        return out

    def write(self, name: CatalogName, records: dict[str, dict[str, Any]]) -> None:
        self._store.put(name.value, records)

    def drop(self, name: CatalogName) -> None:
        self._store.delete(name.value)

    # ------------------------------------------------------------------
    # Widoki typowane
    # ------------------------------------------------------------------

    def discovered(self) -> dict[Handle, ScriptEntry]:
        return {
            h: ScriptEntry.from_record(h, r)
            for h, r in self.records(CatalogName.DISCOVERED).items()
        }

    def managed(self, name: CatalogName) -> dict[Handle, ManagedScript]:
        if name == CatalogName.DISCOVERED:
            raise ValueError("Katalog odkrytych nie zawiera rekordów zarządzanych")
        return {h: ManagedScript.from_record(h, r, name) for h, r in self.records(name).items()}

    # ------------------------------------------------------------------
    # Unikalność między katalogami
    # ------------------------------------------------------------------

    def owner_of(self, handle: Handle) -> CatalogName | None:
        for name in CatalogName:
            if handle in self.raw(name):
                return name
        return None

    def all_handles(self) -> set[Handle]:
        handles: set[Handle] = set()
        for name in CatalogName:
            handles.update(self.raw(name))
        return handles
