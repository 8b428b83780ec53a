"""
Struktury danych dla zestawów reguł (rules).

Zestaw reguł jednego skryptu: uporządkowane mapowanie
ConditionKey → Argument oraz tryb dopasowania (any/all).

Tryb jest polem obok warunków, nigdy kluczem w słowniku warunków.
Format przewodowy (JSON) trzyma go pod kluczem "__mode" i jest
konwertowany przez from_wire() / to_wire() bez strat.

Trzy stany (RuleState):
  ABSENT    — rekord nie ma pola rules (None)  → werdykt domyślny
  EMPTY     — zestaw obecny, zero warunków     → nigdy nie pasuje
  NON_EMPTY — zestaw z warunkami               → pełna ewaluacja
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Iterator

from .common import MODE_KEY, NEGATION_TAG, Argument, MatchMode, is_scalar


# ---------------------------------------------------------------------------
# ConditionKey
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ConditionKey:
    """
    Referencja do predykatu z flagą negacji.

    Serializacja: "is_home" lub "__neg:is_home".
    """
    predicate: str
    negated: bool = False

    @classmethod
    def parse(cls, raw: str) -> "ConditionKey":
        if raw.startswith(NEGATION_TAG):
            return cls(predicate=raw[len(NEGATION_TAG):], negated=True)
        return cls(predicate=raw)

    def __str__(self) -> str:
        return f"{NEGATION_TAG}{self.predicate}" if self.negated else self.predicate

    @property
    def display(self) -> str:
        """Forma dla człowieka: 'NOT is_home'."""
        return f"NOT {self.predicate}" if self.negated else self.predicate


# ---------------------------------------------------------------------------
# RuleState
# ---------------------------------------------------------------------------

class RuleState(StrEnum):
    ABSENT    = "absent"
    EMPTY     = "empty"
    NON_EMPTY = "non_empty"


# ---------------------------------------------------------------------------
# RuleSet
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class RuleSet:
    """
    Zestaw warunków przypisany do jednego skryptu.

    - conditions:    ConditionKey → Argument (kolejność wstawiania tylko do wyświetlania)
    - mode:          "any" | "all"; nieznana wartość (także nie-napis) zostaje
                     zachowana bez zmian,
                     silnik traktuje ją jako brak dopasowania
    - explicit_mode: czy "__mode" było obecne w danych wejściowych
                     (potrzebne do bezstratnego to_wire())
    """
    conditions: dict[ConditionKey, Argument] = field(default_factory=dict)
    mode: Any = MatchMode.ANY
    explicit_mode: bool = field(default=True, compare=False, repr=False)

    # ------------------------------------------------------------------
    # Operacje konsumowane przez silnik
    # ------------------------------------------------------------------

    def actual_conditions(self) -> dict[ConditionKey, Argument]:
        return self.conditions

    def is_empty(self) -> bool:
        return len(self.conditions) == 0

    @staticmethod
    def state_of(rules: "RuleSet | None") -> RuleState:
        if rules is None:
            return RuleState.ABSENT
        if rules.is_empty():
            return RuleState.EMPTY
        return RuleState.NON_EMPTY

    # ------------------------------------------------------------------
    # Budowanie
    # ------------------------------------------------------------------

    def with_condition(self, key: ConditionKey, argument: Argument = True) -> "RuleSet":
        """Kopia z dodanym warunkiem; ten sam (predykat, negacja) nadpisuje argument."""
        conditions = dict(self.conditions)
        conditions[key] = copy.deepcopy(argument)
        return RuleSet(conditions=conditions, mode=self.mode, explicit_mode=self.explicit_mode)

    def without_condition(self, key: ConditionKey) -> "RuleSet":
        conditions = {k: v for k, v in self.conditions.items() if k != key}
        return RuleSet(conditions=conditions, mode=self.mode, explicit_mode=self.explicit_mode)

    def __iter__(self) -> Iterator[tuple[ConditionKey, Argument]]:
        return iter(self.conditions.items())

    def __len__(self) -> int:
        return len(self.conditions)

    # ------------------------------------------------------------------
    # Format przewodowy
    # ------------------------------------------------------------------

    @classmethod
    def from_wire(cls, payload: dict[str, Any]) -> "RuleSet":
        """
        Buduje RuleSet z obiektu JSON.

        Raises:
            ValueError gdy payload nie jest obiektem (dict).
        """
        if not isinstance(payload, dict):
            raise ValueError(
                f"Zestaw reguł musi być obiektem JSON, otrzymano {type(payload).__name__}"
            )

        explicit = MODE_KEY in payload
        raw_mode = payload.get(MODE_KEY, MatchMode.ANY)
        try:
            mode: Any = MatchMode(raw_mode)
        except ValueError:
            mode = copy.deepcopy(raw_mode)

        conditions: dict[ConditionKey, Argument] = {}
        for raw_key, argument in payload.items():
            if raw_key == MODE_KEY:
                continue
            conditions[ConditionKey.parse(str(raw_key))] = copy.deepcopy(argument)

        return cls(conditions=conditions, mode=mode, explicit_mode=explicit)

    def to_wire(self) -> dict[str, Any]:
        """Serializuje do obiektu JSON; "__mode" na końcu, gdy był jawny."""
        out: dict[str, Any] = {
            str(key): copy.deepcopy(argument) for key, argument in self.conditions.items()
        }
        if self.explicit_mode:
            out[MODE_KEY] = str(self.mode) if isinstance(self.mode, MatchMode) else copy.deepcopy(self.mode)
        return out

    # ------------------------------------------------------------------
    # Wyświetlanie
    # ------------------------------------------------------------------

    def describe(self) -> str:
        """
        Opis dla człowieka, np.::

            NOT is_tax(category, news) | is_home() (Mode: ALL)
        """
        parts = [
            f"{key.display}({_fmt_argument(argument)})"
            for key, argument in self.conditions.items()
        ]
        text = " | ".join(parts)
        if self.explicit_mode:
            text = f"{text} (Mode: {str(self.mode).upper()})" if text else f"(Mode: {str(self.mode).upper()})"
        return text


def _fmt_scalar(value: Any) -> str:
    if isinstance(value, str) and (value == "" or "," in value):
        return f'"{value}"'
    return str(value)


def _fmt_argument(argument: Argument) -> str:
    if argument is True or argument is None:
        return ""
    if isinstance(argument, list):
        return ", ".join(_fmt_scalar(a) for a in argument)
    if is_scalar(argument):
        return _fmt_scalar(argument)
    return repr(argument)
