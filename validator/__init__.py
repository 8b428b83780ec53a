"""
validator — walidacja zestawów reguł i rekordów skryptów ręcznych.

Interfejs publiczny:
    RuleSetValidator        — walidator zestawu reguł (etapy A–C)
    validate_manual_script  — walidator rekordu skryptu ręcznego
    is_valid_handle, is_valid_source_url
    ValidationReport, ValidationError, ErrorCode — typy raportu

Typowe użycie:
    from matcher import build_default_registry
    from validator import RuleSetValidator

    validator = RuleSetValidator(build_default_registry())
    report = validator.validate({"__neg:is_home": True, "__mode": "all"})
    if not report.is_valid:
        for e in report.errors:
            print(e.code, e.path, e.message)
"""

from .types import ErrorCode, ValidationError, ValidationReport
from .ruleset_validator import RuleSetValidator
from .script_validator import is_valid_handle, is_valid_source_url, validate_manual_script

__all__ = [
    "ErrorCode",
    "ValidationError",
    "ValidationReport",
    "RuleSetValidator",
    "is_valid_handle",
    "is_valid_source_url",
    "validate_manual_script",
]
