"""
catalog/store.py — magazyn opcji klucz → wartość JSON.

Trzy katalogi skryptów są zapisywane jako pełne mapy pod nazwami opcji
(CatalogName). Magazyn nie zna struktury rekordów.

Publiczne API:
  OptionStore              — protokół get / put / delete
  MemoryOptionStore()      — słownik w pamięci (testy, symulacje)
  PostgresOptionStore(conn) — tabela option(name, value jsonb, updated_at)
"""

from __future__ import annotations

import copy
import json
from typing import Any, Protocol


class OptionStore(Protocol):
    def get(self, name: str, default: Any = None) -> Any: ...

    def put(self, name: str, value: Any) -> None: ...

    def delete(self, name: str) -> None: ...


# ---------------------------------------------------------------------------
# MemoryOptionStore
# ---------------------------------------------------------------------------

class MemoryOptionStore:
    """
    Magazyn w pamięci. Odczyt i zapis kopiują wartość,
    więc wywołujący nigdy nie współdzieli obiektów z magazynem.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, name: str, default: Any = None) -> Any:
        if name not in self._data:
            return default
        return copy.deepcopy(self._data[name])

    def put(self, name: str, value: Any) -> None:
        self._data[name] = copy.deepcopy(value)

    def delete(self, name: str) -> None:
        self._data.pop(name, None)

    def __contains__(self, name: object) -> bool:
        return name in self._data


# ---------------------------------------------------------------------------
# PostgresOptionStore
# ---------------------------------------------------------------------------

class PostgresOptionStore:
    """
    Magazyn w tabeli option (db/schema.sql).

    Każdy put() to jeden INSERT … ON CONFLICT zatwierdzany od razu —
    atomowa podmiana całego rekordu. Równoległe zapisy: wygrywa ostatni.

    Args:
        conn: połączenie psycopg2 (jsonb wraca jako obiekt Pythona)
    """

    def __init__(self, conn) -> None:
        self._conn = conn

    def get(self, name: str, default: Any = None) -> Any:
        with self._conn.cursor() as cur:
            cur.execute("SELECT value FROM option WHERE name = %s", (name,))
            row = cur.fetchone()
        if row is None:
            return default
        value = row[0]
        # Kolumna jsonb może wrócić jako tekst przy wyłączonym typecasterze
        if isinstance(value, str):
            value = json.loads(value)
        return value

    def put(self, name: str, value: Any) -> None:
        with self._conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO option (name, value, updated_at)
                VALUES (%s, %s::jsonb, now())
                ON CONFLICT (name) DO UPDATE SET
                    value      = EXCLUDED.value,
                    updated_at = EXCLUDED.updated_at
                """,
                (name, json.dumps(value, ensure_ascii=False)),
            )
        self._conn.commit()

    def delete(self, name: str) -> None:
        with self._conn.cursor() as cur:
            cur.execute("DELETE FROM option WHERE name = %s", (name,))
        self._conn.commit()
