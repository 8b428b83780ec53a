"""
Testy walidatora zestawów reguł i rekordów skryptów ręcznych.

Sprawdza:
- odrzucenie payloadu niebędącego obiektem
- kody błędów etapów A–D
- normalizację (trim, tryb małymi literami, deep copy)
- ostrzeżenia: sprzeczne warunki, brak warunków
"""

import pytest

from validator import (
    ErrorCode,
    RuleSetValidator,
    is_valid_handle,
    is_valid_source_url,
    validate_manual_script,
)


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def validator(registry):
    return RuleSetValidator(registry)


def _codes(report):
    return [e.code for e in report.errors]


# ============================================================================
# ZESTAW REGUŁ
# ============================================================================

class TestRuleSetShape:

    @pytest.mark.parametrize("payload", [["is_home"], "is_home", None, 42])
    def test_not_an_object(self, validator, payload):
        report = validator.validate(payload)
        assert not report.is_valid
        assert _codes(report) == [ErrorCode.NOT_AN_OBJECT]
        assert report.normalized is None

    def test_valid_payload(self, validator):
        report = validator.validate({"is_singular": "post", "__neg:is_tax": ["category", "news"], "__mode": "all"})
        assert report.is_valid
        assert report.errors == []

    def test_mode_invalid(self, validator):
        report = validator.validate({"is_home": True, "__mode": "xor"})
        assert _codes(report) == [ErrorCode.MODE_INVALID]
        assert report.errors[0].path == "/__mode"

    @pytest.mark.parametrize("mode", [None, 1, ["any"]])
    def test_non_string_mode_invalid(self, validator, mode):
        report = validator.validate({"is_home": True, "__mode": mode})
        assert _codes(report) == [ErrorCode.MODE_INVALID]

    def test_mode_is_normalized(self, validator):
        report = validator.validate({"is_home": True, "__mode": " ALL "})
        assert report.is_valid
        assert report.normalized["__mode"] == "all"


class TestRuleSetConditions:

    def test_unknown_predicate(self, validator):
        report = validator.validate({"is_homepage": True})
        assert _codes(report) == [ErrorCode.PRED_UNKNOWN]
        assert report.errors[0].details == {"pred": "is_homepage"}

    def test_predicate_name_is_case_sensitive(self, validator):
        assert _codes(validator.validate({"Is_Home": True})) == [ErrorCode.PRED_UNKNOWN]

    def test_empty_negated_key(self, validator):
        report = validator.validate({"__neg:": True})
        assert _codes(report) == [ErrorCode.KEY_EMPTY]
        assert report.errors[0].path == "/__neg:"

    def test_argument_shape(self, validator):
        report = validator.validate({"is_singular": {"type": "post"}})
        assert _codes(report) == [ErrorCode.ARGUMENT_SHAPE]

    def test_nested_list_is_bad_shape(self, validator):
        assert _codes(validator.validate({"is_tax": [["category"]]})) == [ErrorCode.ARGUMENT_SHAPE]

    def test_argument_to_no_arg_predicate(self, validator):
        report = validator.validate({"is_home": "yes"})
        assert _codes(report) == [ErrorCode.ARITY_MISMATCH]
        assert report.errors[0].details["arity"] == "none"

    def test_too_many_arguments(self, validator):
        report = validator.validate({"is_tax": ["category", "news", "x"]})
        assert _codes(report) == [ErrorCode.ARITY_MISMATCH]
        assert report.errors[0].details["max_args"] == 2

    def test_null_argument_accepted(self, validator):
        assert validator.validate({"is_home": None}).is_valid

    def test_pointer_escapes_slash(self, validator):
        report = validator.validate({"a/b": True})
        assert report.errors[0].path == "/a~1b"

    def test_all_errors_collected(self, validator):
        report = validator.validate({"nope": True, "is_home": 1, "__mode": "some"})
        assert set(_codes(report)) == {ErrorCode.MODE_INVALID, ErrorCode.PRED_UNKNOWN, ErrorCode.ARITY_MISMATCH}


class TestNormalizationAndWarnings:

    def test_payload_not_mutated(self, validator):
        payload = {" is_singular ": " post ", "is_tax": [" category ", "news"]}
        report = validator.validate(payload)
        assert report.normalized == {"is_singular": "post", "is_tax": ["category", "news"]}
        assert payload == {" is_singular ": " post ", "is_tax": [" category ", "news"]}

    def test_contradiction_warning(self, validator):
        report = validator.validate({"is_home": True, "__neg:is_home": True})
        assert report.is_valid
        assert any("NOT is_home" in w for w in report.warnings)

    def test_empty_rules_warning(self, validator):
        report = validator.validate({"__mode": "any"})
        assert report.is_valid
        assert report.warnings


# ============================================================================
# SKRYPTY RĘCZNE
# ============================================================================

class TestManualScript:

    @pytest.mark.parametrize("handle,ok", [
        ("my-script_2", True),
        ("", False),
        ("with space", False),
        ("zażółć", False),
        (None, False),
    ])
    def test_handle(self, handle, ok):
        assert is_valid_handle(handle) is ok

    @pytest.mark.parametrize("src,ok", [
        ("https://cdn.example.com/a.js", True),
        ("http://example.com/a.js?ver=1", True),
        ("//cdn.example.com/a.js", False),
        ("ftp://example.com/a.js", False),
        ("https://", False),
        ("https://example.com/a b.js", False),
        ("", False),
    ])
    def test_source_url(self, src, ok):
        assert is_valid_source_url(src) is ok

    def test_valid_record_normalized(self):
        report = validate_manual_script({"handle": " tracker ", "src": "https://cdn.example.com/t.js", "ver": ""})
        assert report.is_valid
        assert report.normalized == {
            "handle": "tracker",
            "src": "https://cdn.example.com/t.js",
            "ver": None,
            "deps": "",
            "in_footer": False,
            "strategy": "none",
        }

    def test_strategy_uppercase_accepted(self):
        report = validate_manual_script({"handle": "t", "src": "https://e.com/t.js", "strategy": "DEFER"})
        assert report.is_valid
        assert report.normalized["strategy"] == "defer"

    def test_collects_errors(self):
        report = validate_manual_script({"handle": "bad handle", "src": "nope", "deps": 5, "strategy": "lazy"})
        assert set(_codes(report)) == {
            ErrorCode.HANDLE_INVALID,
            ErrorCode.SRC_INVALID,
            ErrorCode.DEPS_INVALID,
            ErrorCode.STRATEGY_INVALID,
        }

    def test_deps_list_accepted(self):
        report = validate_manual_script({"handle": "t", "src": "https://e.com/t.js", "deps": ["jquery"]})
        assert report.is_valid

    def test_not_an_object(self):
        assert _codes(validate_manual_script("tracker")) == [ErrorCode.NOT_AN_OBJECT]
