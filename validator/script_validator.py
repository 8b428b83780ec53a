"""
validator/script_validator.py — walidacja rekordów skryptów dodawanych ręcznie.

is_valid_handle(handle)       -> bool
is_valid_source_url(src)      -> bool
validate_manual_script(data)  -> ValidationReport
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlsplit

from data_model import LoadStrategy

from .normalizer import normalize_manual_script
from .types import ErrorCode, ValidationError, ValidationReport

_HANDLE_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


def is_valid_handle(handle: Any) -> bool:
    return isinstance(handle, str) and bool(_HANDLE_RE.match(handle))


def is_valid_source_url(src: Any) -> bool:
    """Bezwzględny adres http(s) z hostem, bez białych znaków."""
    if not isinstance(src, str) or not src or any(c.isspace() for c in src):
        return False
    try:
        parts = urlsplit(src)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def validate_manual_script(data: dict[str, Any]) -> ValidationReport:
    """Sprawdza handle, src, deps i strategy rekordu skryptu ręcznego."""
    if not isinstance(data, dict):
        return ValidationReport(is_valid=False, errors=[ValidationError(
            code=ErrorCode.NOT_AN_OBJECT,
            path="/",
            message="Dane skryptu muszą być obiektem.",
            expected_fix="Prześlij obiekt z polami handle, src, ver, deps, in_footer, strategy.",
        )])

    record = normalize_manual_script(data)
    errors: list[ValidationError] = []

    if not is_valid_handle(record.get("handle")):
        errors.append(ValidationError(
            code=ErrorCode.HANDLE_INVALID,
            path="/handle",
            message=f"Nieprawidłowy handle {record.get('handle')!r}.",
            expected_fix="Handle może zawierać tylko litery, cyfry, '_' i '-'.",
        ))

    if not is_valid_source_url(record.get("src")):
        errors.append(ValidationError(
            code=ErrorCode.SRC_INVALID,
            path="/src",
            message=f"Nieprawidłowy adres skryptu {record.get('src')!r}.",
            expected_fix="Podaj pełny adres URL http(s)://…",
        ))

    deps = record.get("deps")
    if not (isinstance(deps, str) or (isinstance(deps, list) and all(isinstance(d, str) for d in deps))):
        errors.append(ValidationError(
            code=ErrorCode.DEPS_INVALID,
            path="/deps",
            message="Zależności muszą być napisem rozdzielanym przecinkami lub listą napisów.",
            expected_fix="Np. \"jquery, wp-util\".",
        ))

    if record.get("strategy") not in {s.value for s in LoadStrategy}:
        errors.append(ValidationError(
            code=ErrorCode.STRATEGY_INVALID,
            path="/strategy",
            message=f"Nieznana strategia ładowania {record.get('strategy')!r}.",
            expected_fix="Użyj \"none\", \"async\" lub \"defer\".",
        ))

    return ValidationReport(
        is_valid=len(errors) == 0,
        errors=errors,
        normalized=record,
    )
