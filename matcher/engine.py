"""
matcher/engine.py — silnik dopasowania reguł.

matches(rules, context, registry, absent_default) -> bool

Algorytm:
  1. ABSENT     → absent_default(context)
  2. EMPTY      → False (operator jawnie wyczyścił warunki)
  3. NON_EMPTY  → ewaluacja warunków w kolejności:
       - negacja odwraca wynik predykatu
       - nierozwiązywalny predykat: "all" → False, "any" → pomiń
       - zły kształt argumentu → warunek niespełniony (bez względu na negację)
  4. "any" → True przy pierwszym prawdziwym warunku, inaczej False
     "all" → False przy pierwszym fałszywym warunku, inaczej True
  5. Nieznany tryb → False

Funkcja jest deterministyczna, nie loguje i niczego nie modyfikuje.
"""

from __future__ import annotations

from typing import Any, Callable

from data_model import Argument, ConditionKey, MatchMode, Predicate, RuleSet, RuleState

from .registry import PredicateRegistry

# Werdykt dla rekordu bez pola rules
AbsentDefault = Callable[[Any], bool]


def always_true(context: Any) -> bool:
    return True


# ---------------------------------------------------------------------------
# Pojedynczy warunek
# ---------------------------------------------------------------------------

def evaluate_condition(
    predicate: Predicate,
    key: ConditionKey,
    argument: Argument,
    context: Any,
) -> bool:
    args = predicate.positional_args(argument)
    if args is None:
        return False
    result = predicate(context, *args)
    return not result if key.negated else result


# ---------------------------------------------------------------------------
# Zestaw reguł
# ---------------------------------------------------------------------------

def matches(
    rules: RuleSet | None,
    context: Any,
    registry: PredicateRegistry,
    absent_default: AbsentDefault,
) -> bool:
    """
    Zwraca werdykt zestawu reguł dla kontekstu żądania.

    Args:
        rules:          RuleSet lub None (rekord bez reguł)
        context:        nieprzezroczysty obiekt przekazywany do predykatów
        registry:       rejestr predykatów
        absent_default: werdykt gdy rules is None
    """
    state = RuleSet.state_of(rules)
    if state == RuleState.ABSENT:
        return bool(absent_default(context))
    if state == RuleState.EMPTY:
        return False

    mode = rules.mode
    if mode not in (MatchMode.ANY, MatchMode.ALL):
        return False

    for key, argument in rules.actual_conditions().items():
        predicate = registry.resolve(key.predicate)
        if predicate is None:
            if mode == MatchMode.ALL:
                return False
            continue

        result = evaluate_condition(predicate, key, argument, context)

        if mode == MatchMode.ANY and result:
            return True
        if mode == MatchMode.ALL and not result:
            return False

    return mode == MatchMode.ALL


# ---------------------------------------------------------------------------
# RuleMatcher: silnik z ustalonym werdyktem domyślnym
# ---------------------------------------------------------------------------

class RuleMatcher:
    """
    Silnik związany z rejestrem i werdyktem dla braku reguł.

    Użycie::

        removal  = RuleMatcher(registry, is_frontend_request)
        addition = RuleMatcher(registry, always_true)
        removal.matches(record.rules, ctx)
    """

    def __init__(self, registry: PredicateRegistry, absent_default: AbsentDefault) -> None:
        self._registry       = registry
        self._absent_default = absent_default

    @property
    def registry(self) -> PredicateRegistry:
        return self._registry

    def matches(self, rules: RuleSet | None, context: Any) -> bool:
        return matches(rules, context, self._registry, self._absent_default)
