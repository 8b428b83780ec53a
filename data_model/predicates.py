"""
Struktury danych dla predykatów (predicates).

Predykat to nazwana funkcja logiczna kontekstu żądania, opcjonalnie
sparametryzowana. Rejestr predykatów (matcher.registry) przechowuje
niezmienne obiekty Predicate budowane przy starcie procesu.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Callable

from .common import Argument, is_scalar


# ---------------------------------------------------------------------------
# Enumeracje
# ---------------------------------------------------------------------------

class PredicateArity(StrEnum):
    """
    Kształt argumentów przyjmowanych przez predykat.

    - NONE: tylko wywołanie bez argumentów, np. is_home()
    - ONE:  bez argumentów lub jeden skalar, np. is_singular("post")
    - MANY: bez argumentów, skalar lub lista pozycyjna, np. is_tax("category", "news")
    """
    NONE = "none"
    ONE  = "one"
    MANY = "many"


# ---------------------------------------------------------------------------
# Predicate
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Predicate:
    """
    Zarejestrowany predykat.

    - name:       nazwa, dokładne dopasowanie z uwzględnieniem wielkości liter
    - arity:      kształt argumentów (PredicateArity)
    - evaluate:   funkcja (context, *args) -> bool
    - max_args:   górny limit argumentów pozycyjnych dla MANY
    - meaning_pl: krótki opis semantyczny po polsku
    """
    name: str
    arity: PredicateArity
    evaluate: Callable[..., bool]
    max_args: int = 2
    meaning_pl: str | None = None

    def positional_args(self, argument: Argument) -> tuple[Any, ...] | None:
        """
        Zamienia zapisany argument na krotkę argumentów wywołania.

        Zwraca None gdy kształt argumentu nie pasuje do arności
        (warunek jest wtedy traktowany jako niespełniony).
        """
        if argument is True or argument is None:
            return ()

        if is_scalar(argument):
            if self.arity == PredicateArity.NONE:
                return None
            return (argument,)

        if isinstance(argument, list):
            if self.arity != PredicateArity.MANY:
                return None
            if len(argument) > self.max_args:
                return None
            if not all(is_scalar(a) for a in argument):
                return None
            return tuple(argument)

        return None

    def __call__(self, context: Any, *args: Any) -> bool:
        return bool(self.evaluate(context, *args))
