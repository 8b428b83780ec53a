"""
data_model — struktury danych modelu Script Audit.

Użycie:
  from data_model import RuleSet, ConditionKey, Predicate, ManagedScript, ...

Moduły:
  common     — Handle, Argument, MatchMode, LoadStrategy, CatalogName
  predicates — PredicateArity, Predicate
  rules      — ConditionKey, RuleSet, RuleState
  scripts    — ScriptEntry, ManagedScript, parse_dependencies

Format przewodowy zestawu reguł:
  {"is_singular": "post", "__neg:is_home": true, "__mode": "any"}
"""

from .common import (
    Handle,
    Scalar,
    Argument,
    MODE_KEY,
    NEGATION_TAG,
    MatchMode,
    LoadStrategy,
    CatalogName,
    is_scalar,
)
from .predicates import (
    PredicateArity,
    Predicate,
)
from .rules import (
    ConditionKey,
    RuleState,
    RuleSet,
)
from .scripts import (
    ScriptEntry,
    ManagedScript,
    TRANSITION_KEY,
    parse_dependencies,
)

__all__ = [
    # common
    "Handle",
    "Scalar",
    "Argument",
    "MODE_KEY",
    "NEGATION_TAG",
    "MatchMode",
    "LoadStrategy",
    "CatalogName",
    "is_scalar",
    # predicates
    "PredicateArity",
    "Predicate",
    # rules
    "ConditionKey",
    "RuleState",
    "RuleSet",
    # scripts
    "ScriptEntry",
    "ManagedScript",
    "TRANSITION_KEY",
    "parse_dependencies",
]
