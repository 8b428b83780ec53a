"""
validator/types.py — kody błędów i struktury raportu walidacji.

ValidationError — pojedynczy błąd z kodem, ścieżką JSON Pointer,
    komunikatem i mechaniczną instrukcją naprawy.
ValidationReport — wynik walidacji: is_valid, errors, warnings,
    opcjonalnie znormalizowany payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Stałe kody błędów walidatora (etapy A–D)."""

    # A: kształt payloadu
    NOT_AN_OBJECT     = "E_NOT_AN_OBJECT"
    MODE_INVALID      = "E_MODE_INVALID"

    # B: klucze warunków
    KEY_EMPTY         = "E_KEY_EMPTY"
    PRED_UNKNOWN      = "E_PRED_UNKNOWN"

    # C: argumenty
    ARGUMENT_SHAPE    = "E_ARGUMENT_SHAPE"
    ARITY_MISMATCH    = "E_ARITY_MISMATCH"

    # D: rekord skryptu ręcznego
    HANDLE_INVALID    = "E_HANDLE_INVALID"
    SRC_INVALID       = "E_SRC_INVALID"
    STRATEGY_INVALID  = "E_STRATEGY_INVALID"
    DEPS_INVALID      = "E_DEPS_INVALID"


@dataclass(slots=True)
class ValidationError:
    """
    Pojedynczy błąd walidacji.

    - code:         stały identyfikator klasy błędu (ErrorCode)
    - path:         JSON Pointer do miejsca błędu, np. "/__neg:is_tax"
    - message:      czytelny opis błędu
    - expected_fix: krótka mechaniczna instrukcja naprawy
    - details:      opcjonalny słownik z dodatkowymi danymi
    """

    code: ErrorCode
    path: str
    message: str
    expected_fix: str
    details: dict[str, Any] | None = None


@dataclass(slots=True)
class ValidationReport:
    """
    Wynik pełnej walidacji.

    - is_valid:   True gdy brak błędów (warnings nie wpływają)
    - errors:     lista błędów (ValidationError)
    - warnings:   lista komunikatów ostrzegawczych (str)
    - normalized: payload po normalizacji
                  (None gdy payload nie jest obiektem)
    """

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    normalized: dict[str, Any] | None = None
