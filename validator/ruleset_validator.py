"""
validator/ruleset_validator.py — walidator zestawów reguł z edytora reguł.

RuleSetValidator.validate(payload) -> ValidationReport

Etapy:
  A — kształt payloadu     (obiekt JSON, poprawny "__mode")
  B — klucze warunków      (niepuste, predykat istnieje w rejestrze)
  C — argumenty            (true | skalar | lista skalarów, zgodność z arnością)

Silnik dopasowania toleruje każdy z tych błędów (warunek po prostu nie
pasuje); walidator odrzuca je wcześniej, przy zapisie reguł.
"""

from __future__ import annotations

from typing import Any

from data_model import MODE_KEY, ConditionKey, MatchMode, is_scalar
from matcher import PredicateRegistry

from .normalizer import normalize_rules
from .types import ErrorCode, ValidationError, ValidationReport

# Limit błędów, po którym przerywamy sprawdzanie
MAX_ERRORS = 20


def _pointer(key: str) -> str:
    """JSON Pointer dla klucza (RFC 6901: ~ → ~0, / → ~1)."""
    return "/" + key.replace("~", "~0").replace("/", "~1")


def _argument_shape_ok(argument: Any) -> bool:
    if argument is True or argument is None or is_scalar(argument):
        return True
    return isinstance(argument, list) and all(is_scalar(a) for a in argument)


# ---------------------------------------------------------------------------
# RuleSetValidator
# ---------------------------------------------------------------------------

class RuleSetValidator:
    """
    Walidator zestawu reguł względem rejestru predykatów.

    Użycie:
        validator = RuleSetValidator(build_default_registry())
        report    = validator.validate({"is_singular": "post", "__mode": "any"})
        if report.is_valid:
            rules = RuleSet.from_wire(report.normalized)
    """

    def __init__(self, registry: PredicateRegistry) -> None:
        self._registry = registry

    # ------------------------------------------------------------------
    # Publiczny interfejs
    # ------------------------------------------------------------------

    def validate(self, payload: Any) -> ValidationReport:
        errors: list[ValidationError] = []
        warnings: list[str] = []

        # A: obiekt JSON (fail-fast)
        if not isinstance(payload, dict):
            errors.append(ValidationError(
                code=ErrorCode.NOT_AN_OBJECT,
                path="/",
                message=f"Zestaw reguł musi być obiektem JSON, otrzymano {type(payload).__name__}.",
                expected_fix="Prześlij obiekt {warunek: argument, \"__mode\": \"any\"|\"all\"}.",
            ))
            return ValidationReport(is_valid=False, errors=errors, warnings=warnings)

        rules = normalize_rules(payload)

        self._stage_mode(rules, errors)

        # B + C: warunki
        for raw_key, argument in rules.items():
            if raw_key == MODE_KEY:
                continue
            if len(errors) >= MAX_ERRORS:
                warnings.append(f"Przerwano po {MAX_ERRORS} błędach.")
                break
            self._check_condition(raw_key, argument, errors)

        self._stage_contradictions(rules, warnings)

        if not any(k != MODE_KEY for k in rules):
            warnings.append(
                "Zestaw reguł bez warunków nigdy nie pasuje; "
                "aby przywrócić zachowanie domyślne, usuń reguły."
            )

        return ValidationReport(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            normalized=rules,
        )

    # ------------------------------------------------------------------
    # Stage A: tryb
    # ------------------------------------------------------------------

    def _stage_mode(self, rules: dict[str, Any], errors: list[ValidationError]) -> None:
        if MODE_KEY not in rules:
            return
        mode = rules[MODE_KEY]
        if not isinstance(mode, str) or mode not in {m.value for m in MatchMode}:
            errors.append(ValidationError(
                code=ErrorCode.MODE_INVALID,
                path=_pointer(MODE_KEY),
                message=f"Nieznany tryb dopasowania {mode!r}.",
                expected_fix="Ustaw \"__mode\" na \"any\" lub \"all\".",
                details={"mode": mode},
            ))

    # ------------------------------------------------------------------
    # Stage B + C: pojedynczy warunek
    # ------------------------------------------------------------------

    def _check_condition(
        self,
        raw_key: Any,
        argument: Any,
        errors: list[ValidationError],
    ) -> None:
        path = _pointer(str(raw_key))
        key = ConditionKey.parse(str(raw_key))

        if not isinstance(raw_key, str) or not key.predicate:
            errors.append(ValidationError(
                code=ErrorCode.KEY_EMPTY,
                path=path,
                message="Klucz warunku nie zawiera nazwy predykatu.",
                expected_fix="Użyj nazwy predykatu lub \"__neg:\" + nazwa.",
            ))
            return

        predicate = self._registry.resolve(key.predicate)
        if predicate is None:
            errors.append(ValidationError(
                code=ErrorCode.PRED_UNKNOWN,
                path=path,
                message=f"Predykat '{key.predicate}' nie istnieje w rejestrze.",
                expected_fix="Użyj predykatu z listy `psa predicates`.",
                details={"pred": key.predicate},
            ))
            return

        if not _argument_shape_ok(argument):
            errors.append(ValidationError(
                code=ErrorCode.ARGUMENT_SHAPE,
                path=path,
                message=(
                    f"Argument warunku '{key.display}' ma niedozwolony typ "
                    f"{type(argument).__name__}."
                ),
                expected_fix="Argument musi być true, skalarem lub listą skalarów.",
            ))
            return

        if predicate.positional_args(argument) is None:
            limit = predicate.max_args if predicate.arity == "many" else 1
            errors.append(ValidationError(
                code=ErrorCode.ARITY_MISMATCH,
                path=path,
                message=(
                    f"Predykat '{key.predicate}' (arność {predicate.arity}) "
                    f"nie przyjmuje argumentu {argument!r}."
                ),
                expected_fix=(
                    "Użyj true dla wywołania bez argumentów."
                    if predicate.arity == "none"
                    else f"Podaj co najwyżej {limit} argument(y)."
                ),
                details={"arity": str(predicate.arity), "max_args": limit},
            ))

    # ------------------------------------------------------------------
    # Ostrzeżenia
    # ------------------------------------------------------------------

    def _stage_contradictions(self, rules: dict[str, Any], warnings: list[str]) -> None:
        keys = {ConditionKey.parse(k) for k in rules if isinstance(k, str) and k != MODE_KEY}
        for key in sorted(keys, key=lambda k: k.predicate):
            if key.negated and ConditionKey(key.predicate) in keys:
                warnings.append(
                    f"Warunki '{key.predicate}' i 'NOT {key.predicate}' występują razem."
                )
