"""
Wspólne typy pierwotne używane przez predicates, rules i scripts.

Format przewodowy (wire) zestawu reguł:
  {"__mode": "any"|"all", "<predykat>": arg, "__neg:<predykat>": arg}
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Aliasy typów
# ---------------------------------------------------------------------------

# Unikalny identyfikator skryptu, np. "jquery-migrate"
Handle = str

# Skalar argumentu predykatu (string lub liczba; bool nie jest skalarem)
Scalar = str | int | float

# Argument warunku: True (bez argumentu) | skalar | lista skalarów (pozycyjnie)
Argument = bool | Scalar | list[Scalar] | None


# ---------------------------------------------------------------------------
# Stałe formatu przewodowego
# ---------------------------------------------------------------------------

MODE_KEY     = "__mode"
NEGATION_TAG = "__neg:"


# ---------------------------------------------------------------------------
# Enumeracje
# ---------------------------------------------------------------------------

class MatchMode(StrEnum):
    """Tryb łączenia warunków: ANY = OR, ALL = AND."""
    ANY = "any"
    ALL = "all"


class LoadStrategy(StrEnum):
    """Strategia ładowania skryptu w przeglądarce."""
    NONE  = "none"
    ASYNC = "async"
    DEFER = "defer"

    @classmethod
    def coerce(cls, value: object) -> "LoadStrategy":
        """Zwraca strategię dla wartości z magazynu; nieznane → NONE."""
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


class CatalogName(StrEnum):
    """
    Trzy logiczne katalogi skryptów. Wartość = nazwa opcji w magazynie.

    - DISCOVERED: skrypty zaobserwowane w kolejce renderowania
    - REMOVED:    skrypty warunkowo usuwane z kolejki
    - MANUAL:     skrypty dodane ręcznie, warunkowo wstrzykiwane
    """
    DISCOVERED = "psa_found_scripts"
    REMOVED    = "psa_dequeued_scripts"
    MANUAL     = "psa_manual_scripts"

    @property
    def label(self) -> str:
        return {
            CatalogName.DISCOVERED: "found",
            CatalogName.REMOVED:    "dequeued",
            CatalogName.MANUAL:     "manual",
        }[self]

    @classmethod
    def from_label(cls, label: str) -> "CatalogName":
        for c in cls:
            if c.label == label:
                return c
        raise ValueError(f"Nieznany katalog: '{label}'")


def is_scalar(value: object) -> bool:
    """True dla str/int/float; bool nie jest skalarem."""
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)
