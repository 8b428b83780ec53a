"""
matcher/registry.py — rejestr predykatów.

Rejestr budowany jest raz przy starcie procesu z jawnej listy funkcji,
po czym zamrażany (freeze). Rozwiązywanie nazw jest dokładne i czułe
na wielkość liter; nigdy nie szukamy dowolnych funkcji po nazwie.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Iterator

from data_model import Predicate, PredicateArity

# Wzorzec poprawnej nazwy predykatu: is_home, has_term, is_404 itp.
_NAME_RE = re.compile(r"^[a-z_][a-z0-9_]*$")


class PredicateRegistry:
    """
    Słownik nazwa → Predicate, tylko do odczytu po freeze().

    Użycie::

        registry = PredicateRegistry()
        registry.register("is_home", PredicateArity.NONE, lambda ctx: ctx.has("home"))
        registry.freeze()
        registry.resolve("is_home")   # → Predicate
        registry.resolve("is_Home")   # → None
    """

    def __init__(self, predicates: Iterable[Predicate] = ()) -> None:
        self._by_name: dict[str, Predicate] = {}
        self._frozen = False
        for p in predicates:
            self.add(p)

    # ------------------------------------------------------------------
    # Rejestracja (tylko przy starcie)
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        arity: PredicateArity,
        fn: Callable[..., bool],
        *,
        max_args: int | None = None,
        meaning_pl: str | None = None,
    ) -> Predicate:
        if not callable(fn):
            raise TypeError(f"Predykat '{name}' musi być wywoływalny, otrzymano {type(fn).__name__}")
        predicate = Predicate(
            name=name,
            arity=PredicateArity(arity),
            evaluate=fn,
            max_args=max_args if max_args is not None else (2 if arity == PredicateArity.MANY else 1),
            meaning_pl=meaning_pl,
        )
        self.add(predicate)
        return predicate

    def add(self, predicate: Predicate) -> None:
        if self._frozen:
            raise ValueError(
                f"Rejestr jest zamrożony — nie można dodać predykatu '{predicate.name}'"
            )
        if not _NAME_RE.match(predicate.name):
            raise ValueError(f"Nieprawidłowa nazwa predykatu: '{predicate.name}'")
        if predicate.name in self._by_name:
            raise ValueError(f"Predykat '{predicate.name}' jest już zarejestrowany")
        self._by_name[predicate.name] = predicate

    def freeze(self) -> "PredicateRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, name: str) -> Predicate | None:
        """Zwraca predykat lub None (NotFound)."""
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return list(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Predicate]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)
