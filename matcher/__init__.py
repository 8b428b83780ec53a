"""
matcher — rejestr predykatów i silnik dopasowania reguł.

Publiczne API:
  PredicateRegistry                       rejestr nazwa → Predicate
  matches(rules, ctx, registry, default)  → bool
  RuleMatcher(registry, default)          silnik z ustalonym werdyktem domyślnym
  RequestContext                          kontekst żądania
  build_default_registry()                → zamrożony rejestr wbudowany
  is_frontend_request(ctx)                → bool
  load_context_json(path)                 → RequestContext
  load_rules_json(path)                   → RuleSet | None
"""

from .registry import PredicateRegistry
from .engine   import matches, evaluate_condition, always_true, RuleMatcher
from .context  import RequestContext, ROUTE_FLAGS
from .builtins import build_default_registry, is_frontend_request, FRONTEND_PREDICATE
from .loader   import load_context_json, load_rules_json

__all__ = [
    "PredicateRegistry",
    "matches",
    "evaluate_condition",
    "always_true",
    "RuleMatcher",
    "RequestContext",
    "ROUTE_FLAGS",
    "build_default_registry",
    "is_frontend_request",
    "FRONTEND_PREDICATE",
    "load_context_json",
    "load_rules_json",
]
