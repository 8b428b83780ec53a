"""
Testy modelu danych: ConditionKey, RuleSet, rekordy katalogów.

Sprawdza:
- parsowanie i serializację klucza negacji
- tryb jako osobne pole (nigdy klucz warunku)
- bezstratny format przewodowy
- trzy stany reguł: ABSENT / EMPTY / NON_EMPTY
- opis reguł dla człowieka
- odczyt rekordów katalogów z magazynu
"""

import pytest

from data_model import (
    CatalogName,
    ConditionKey,
    LoadStrategy,
    ManagedScript,
    MatchMode,
    RuleSet,
    RuleState,
    ScriptEntry,
    parse_dependencies,
)


# ============================================================================
# CONDITION KEY
# ============================================================================

class TestConditionKey:

    def test_plain_key(self):
        key = ConditionKey.parse("is_home")
        assert key == ConditionKey("is_home", negated=False)
        assert str(key) == "is_home"
        assert key.display == "is_home"

    def test_negated_key(self):
        key = ConditionKey.parse("__neg:is_home")
        assert key.predicate == "is_home"
        assert key.negated is True
        assert str(key) == "__neg:is_home"
        assert key.display == "NOT is_home"

    def test_plain_and_negated_are_distinct(self):
        assert ConditionKey("is_home") != ConditionKey("is_home", negated=True)


# ============================================================================
# RULE SET: FORMAT PRZEWODOWY
# ============================================================================

class TestRuleSetWire:

    def test_mode_is_not_a_condition(self):
        rules = RuleSet.from_wire({"is_home": True, "__mode": "all"})
        assert rules.mode == MatchMode.ALL
        assert list(rules.actual_conditions()) == [ConditionKey("is_home")]

    def test_mode_defaults_to_any(self):
        rules = RuleSet.from_wire({"is_home": True})
        assert rules.mode == MatchMode.ANY

    def test_round_trip_with_mode(self):
        payload = {"is_singular": "post", "__neg:is_tax": ["category", "news"], "__mode": "all"}
        assert RuleSet.from_wire(payload).to_wire() == payload

    def test_round_trip_without_mode(self):
        payload = {"is_home": True, "has_term": ["news", "category"]}
        wire = RuleSet.from_wire(payload).to_wire()
        assert wire == payload
        assert "__mode" not in wire

    def test_round_trip_keeps_unknown_mode(self):
        payload = {"is_home": True, "__mode": "xor"}
        rules = RuleSet.from_wire(payload)
        assert rules.mode == "xor"
        assert rules.to_wire() == payload

    @pytest.mark.parametrize("mode", [None, 1, ["all"]])
    def test_round_trip_keeps_non_string_mode(self, mode):
        payload = {"is_home": True, "__mode": mode}
        rules = RuleSet.from_wire(payload)
        assert rules.mode == mode
        assert rules.to_wire() == payload

    def test_arguments_are_copied(self):
        payload = {"is_tax": ["category", "news"]}
        rules = RuleSet.from_wire(payload)
        payload["is_tax"].append("extra")
        assert rules.conditions[ConditionKey("is_tax")] == ["category", "news"]

    def test_non_object_rejected(self):
        with pytest.raises(ValueError):
            RuleSet.from_wire(["is_home"])

    def test_with_condition_overwrites_same_key(self):
        rules = RuleSet().with_condition(ConditionKey("is_singular"), "post")
        rules = rules.with_condition(ConditionKey("is_singular"), "page")
        assert len(rules) == 1
        assert rules.conditions[ConditionKey("is_singular")] == "page"

    def test_without_condition(self):
        rules = RuleSet.from_wire({"is_home": True, "__neg:is_home": True})
        rules = rules.without_condition(ConditionKey("is_home"))
        assert list(rules.conditions) == [ConditionKey("is_home", negated=True)]


# ============================================================================
# RULE SET: STANY
# ============================================================================

class TestRuleState:

    def test_absent(self):
        assert RuleSet.state_of(None) == RuleState.ABSENT

    def test_empty(self):
        assert RuleSet.state_of(RuleSet()) == RuleState.EMPTY

    def test_mode_only_is_empty(self):
        rules = RuleSet.from_wire({"__mode": "all"})
        assert rules.is_empty()
        assert RuleSet.state_of(rules) == RuleState.EMPTY

    def test_non_empty(self):
        assert RuleSet.state_of(RuleSet.from_wire({"is_home": True})) == RuleState.NON_EMPTY


# ============================================================================
# OPIS
# ============================================================================

class TestDescribe:

    def test_describe_with_mode(self):
        rules = RuleSet.from_wire({"__neg:is_tax": ["category", "news"], "is_home": True, "__mode": "all"})
        assert rules.describe() == "NOT is_tax(category, news) | is_home() (Mode: ALL)"

    def test_describe_without_mode(self):
        assert RuleSet.from_wire({"is_singular": "post"}).describe() == "is_singular(post)"


# ============================================================================
# REKORDY KATALOGÓW
# ============================================================================

class TestRecords:

    def test_parse_dependencies_from_string(self):
        assert parse_dependencies("jquery, , lodash ") == ["jquery", "lodash"]

    def test_parse_dependencies_from_list(self):
        assert parse_dependencies([" jquery", "", "wp-util"]) == ["jquery", "wp-util"]

    def test_parse_dependencies_other(self):
        assert parse_dependencies(None) == []

    def test_script_entry_round_trip(self):
        entry = ScriptEntry(
            handle="jquery", src="https://example.com/jquery.js", version=None,
            deps=["a"], in_footer=True, strategy=LoadStrategy.DEFER,
            size=10, mtime=20, found=30,
        )
        record = entry.to_record()
        assert record["ver"] == ""
        assert ScriptEntry.from_record("jquery", record) == entry

    def test_managed_without_rules_is_absent(self):
        rec = ManagedScript.from_record("x", {"src": "https://e.com/x.js"}, CatalogName.MANUAL)
        assert rec.rules is None

    def test_managed_empty_list_rules_is_absent(self):
        rec = ManagedScript.from_record("x", {"src": "https://e.com/x.js", "rules": []}, CatalogName.MANUAL)
        assert rec.rules is None

    def test_managed_malformed_rules_never_match(self):
        rec = ManagedScript.from_record("x", {"rules": "is_home"}, CatalogName.REMOVED)
        assert rec.rules is not None
        assert rec.rules.is_empty()

    def test_managed_keeps_extra_fields(self):
        record = {"src": "https://e.com/x.js", "deps": ["a"], "dequeued": 5, "size": 10, "found": 1}
        rec = ManagedScript.from_record("x", record, CatalogName.REMOVED)
        assert rec.transition == 5
        assert rec.extra == {"size": 10, "found": 1}
        assert rec.to_record()["size"] == 10
        assert "rules" not in rec.to_record()

    def test_manual_deps_string_preserved(self):
        rec = ManagedScript.from_record("x", {"deps": "jquery, wp-util"}, CatalogName.MANUAL)
        assert rec.deps == "jquery, wp-util"
        assert rec.dependency_list == ["jquery", "wp-util"]

    def test_non_mapping_record_rejected(self):
        with pytest.raises(ValueError):
            ManagedScript.from_record("x", "broken", CatalogName.MANUAL)

    def test_strategy_coerced(self):
        assert LoadStrategy.coerce("defer") == LoadStrategy.DEFER
        assert LoadStrategy.coerce("eager") == LoadStrategy.NONE

    def test_catalog_labels(self):
        assert CatalogName.from_label("dequeued") == CatalogName.REMOVED
        assert CatalogName.REMOVED.value == "psa_dequeued_scripts"
        with pytest.raises(ValueError):
            CatalogName.from_label("trash")
