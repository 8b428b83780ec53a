"""
Testy kolejki skryptów i potoku aktywacji.

Sprawdza:
- ScriptQueue: pierwsza rejestracja wygrywa, enqueue bez duplikatów, import/eksport
- scenariusz 3: skrypt ręczny bez reguł ładowany wszędzie
- scenariusz 4: skrypt usuwany bez reguł tylko na front-endzie
- idempotencję, pomijanie błędnych rekordów, kolejność przebiegu renderowania
"""

import logging

import pytest

from catalog import (
    CatalogCorruptError,
    dequeue,
    record_if_new,
    register_manual,
    set_rules,
)
from data_model import CatalogName, LoadStrategy, ScriptEntry
from pipeline import (
    ScriptQueue,
    addition_matcher,
    apply_manual_additions,
    apply_removals,
    removal_matcher,
    run_render_pass,
)
from validator import RuleSetValidator


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def validator(registry):
    return RuleSetValidator(registry)


@pytest.fixture
def with_manual(catalogs):
    register_manual(catalogs, {
        "handle": "tracker",
        "src": "https://cdn.example.com/tracker.js",
        "ver": "2.0",
        "deps": "jquery, ",
        "in_footer": True,
        "strategy": "defer",
    }, now=10)
    return catalogs


@pytest.fixture
def with_removed(catalogs):
    record_if_new(catalogs, ScriptEntry("jquery", "https://example.com/wp-includes/js/jquery/jquery.min.js"), now=1)
    dequeue(catalogs, ["jquery"], now=2)
    # brak reguł → werdykt domyślny
    records = catalogs.raw(CatalogName.REMOVED)
    records["jquery"].pop("rules")
    catalogs.write(CatalogName.REMOVED, records)
    return catalogs


# ============================================================================
# KOLEJKA
# ============================================================================

class TestScriptQueue:

    def test_first_registration_wins(self):
        q = ScriptQueue()
        assert q.register("a", "https://e.com/a.js", [], "1")
        assert not q.register("a", "https://e.com/other.js", [], "2")
        assert q.registered("a").src == "https://e.com/a.js"

    def test_enqueue_requires_registration(self):
        q = ScriptQueue()
        q.enqueue("ghost")
        assert q.queued() == []

    def test_enqueue_once(self, queue):
        queue.enqueue("jquery")
        assert queue.queued() == ["jquery", "theme-main"]

    def test_remove(self, queue):
        queue.remove("jquery")
        queue.remove("missing")
        assert not queue.has("jquery")
        assert queue.queued() == ["theme-main"]

    def test_strategy(self, queue):
        queue.set_strategy("jquery", LoadStrategy.ASYNC)
        assert queue.registered("jquery").strategy == LoadStrategy.ASYNC
        queue.set_strategy("jquery", LoadStrategy.NONE)
        assert "strategy" not in queue.registered("jquery").extra

    def test_footer_group(self, queue):
        assert queue.registered("theme-main").extra["group"] == 1
        assert queue.registered("jquery").in_footer is False

    def test_items_round_trip(self, queue):
        queue.register("idle", "https://e.com/idle.js")
        rebuilt = ScriptQueue.from_items(queue.to_items())
        assert rebuilt.queued() == ["jquery", "theme-main"]
        assert rebuilt.has("idle")
        assert rebuilt.to_items() == queue.to_items()

    def test_from_items_rejects_missing_handle(self):
        with pytest.raises(ValueError):
            ScriptQueue.from_items([{"src": "https://e.com/a.js"}])


# ============================================================================
# DODAWANIE RĘCZNYCH
# ============================================================================

class TestManualAdditions:

    def test_scenario_3_no_rules_loads_everywhere(self, with_manual, registry, frontend_ctx, admin_ctx):
        manual = with_manual.managed(CatalogName.MANUAL)
        for ctx in (frontend_ctx, admin_ctx):
            q = ScriptQueue()
            assert apply_manual_additions(manual, ctx, q, addition_matcher(registry)) == ["tracker"]
            script = q.registered("tracker")
            assert q.queued() == ["tracker"]
            assert script.deps == ["jquery"]
            assert script.version == "2.0"
            assert script.in_footer is True
            assert script.strategy == LoadStrategy.DEFER

    def test_rules_gate_addition(self, with_manual, registry, validator, make_ctx):
        set_rules(with_manual, CatalogName.MANUAL, "tracker", {"is_home": True}, validator)
        manual = with_manual.managed(CatalogName.MANUAL)
        q = ScriptQueue()
        assert apply_manual_additions(manual, make_ctx(flags={"search"}), q, addition_matcher(registry)) == []
        assert apply_manual_additions(manual, make_ctx(flags={"home"}), q, addition_matcher(registry)) == ["tracker"]

    def test_empty_rules_never_add(self, with_manual, registry, validator, frontend_ctx):
        set_rules(with_manual, CatalogName.MANUAL, "tracker", {"__mode": "any"}, validator)
        q = ScriptQueue()
        apply_manual_additions(with_manual.managed(CatalogName.MANUAL), frontend_ctx, q, addition_matcher(registry))
        assert not q.has("tracker")

    def test_idempotent(self, with_manual, registry, frontend_ctx):
        manual = with_manual.managed(CatalogName.MANUAL)
        q = ScriptQueue()
        apply_manual_additions(manual, frontend_ctx, q, addition_matcher(registry))
        apply_manual_additions(manual, frontend_ctx, q, addition_matcher(registry))
        assert q.queued() == ["tracker"]

    def test_invalid_record_skipped(self, store, catalogs, registry, frontend_ctx, caplog):
        store.put(CatalogName.MANUAL.value, {
            "broken": {"src": "javascript:alert(1)"},
            "ok": {"src": "https://cdn.example.com/ok.js"},
        })
        q = ScriptQueue()
        with caplog.at_level(logging.WARNING, logger="pipeline.activation"):
            added = apply_manual_additions(
                catalogs.managed(CatalogName.MANUAL), frontend_ctx, q, addition_matcher(registry),
            )
        assert added == ["ok"]
        assert "broken" in caplog.text


# ============================================================================
# USUWANIE
# ============================================================================

class TestRemovals:

    def test_scenario_4_no_rules_frontend_only(self, with_removed, registry, queue, frontend_ctx, admin_ctx):
        removed = with_removed.managed(CatalogName.REMOVED)
        matcher = removal_matcher(registry)

        assert apply_removals(removed, admin_ctx, queue, matcher) == []
        assert queue.has("jquery")

        assert apply_removals(removed, frontend_ctx, queue, matcher) == ["jquery"]
        assert not queue.has("jquery")
        assert queue.registered("jquery") is None

    def test_default_rules_after_dequeue(self, catalogs, registry, queue, admin_ctx, frontend_ctx):
        record_if_new(catalogs, ScriptEntry("theme-main", "https://example.com/wp-content/themes/t/main.js"))
        dequeue(catalogs, ["theme-main"])
        removed = catalogs.managed(CatalogName.REMOVED)
        apply_removals(removed, admin_ctx, queue, removal_matcher(registry))
        assert queue.has("theme-main")
        apply_removals(removed, frontend_ctx, queue, removal_matcher(registry))
        assert not queue.has("theme-main")

    def test_rules_gate_removal(self, with_removed, registry, validator, queue, make_ctx):
        set_rules(with_removed, CatalogName.REMOVED, "jquery",
                  {"is_singular": "post", "__mode": "any"}, validator)
        removed = with_removed.managed(CatalogName.REMOVED)
        apply_removals(removed, make_ctx(post_type="page"), queue, removal_matcher(registry))
        assert queue.has("jquery")
        apply_removals(removed, make_ctx(post_type="post"), queue, removal_matcher(registry))
        assert not queue.has("jquery")

    def test_idempotent(self, with_removed, registry, queue, frontend_ctx):
        removed = with_removed.managed(CatalogName.REMOVED)
        apply_removals(removed, frontend_ctx, queue, removal_matcher(registry))
        apply_removals(removed, frontend_ctx, queue, removal_matcher(registry))
        assert queue.queued() == ["theme-main"]


# ============================================================================
# PRZEBIEG RENDEROWANIA
# ============================================================================

class TestRenderPass:

    def test_full_pass(self, with_manual, registry, queue, manager_ctx):
        record_if_new(with_manual, ScriptEntry("jquery", "https://example.com/jquery.js"), now=1)
        dequeue(with_manual, ["jquery"], now=2)

        report = run_render_pass(with_manual, manager_ctx, queue, registry, now=3)

        assert report.added == ["tracker"]
        assert report.removed == ["jquery"]
        assert report.discovered == ["theme-main"]
        assert queue.queued() == ["theme-main", "tracker"]
        # skrypt ręczny nie trafia do katalogu odkrytych
        assert set(with_manual.raw(CatalogName.DISCOVERED)) == {"theme-main"}

    def test_no_discover(self, catalogs, registry, queue, manager_ctx):
        report = run_render_pass(catalogs, manager_ctx, queue, registry, discover=False)
        assert report.discovered == []
        assert catalogs.raw(CatalogName.DISCOVERED) == {}

    def test_corrupt_catalog_raises(self, store, catalogs, registry, queue, frontend_ctx):
        store.put(CatalogName.REMOVED.value, 17)
        with pytest.raises(CatalogCorruptError):
            run_render_pass(catalogs, frontend_ctx, queue, registry)

    def test_non_object_manual_record_does_not_block_pass(self, with_removed, store, registry, queue,
                                                          frontend_ctx, caplog):
        store.put(CatalogName.MANUAL.value, {
            "good": {"src": "https://cdn.example.com/good.js", "added_on": 1},
            "bad": "x",
        })
        with caplog.at_level(logging.WARNING, logger="catalog.catalogs"):
            report = run_render_pass(with_removed, frontend_ctx, queue, registry, discover=False)

        assert report.added == ["good"]
        assert report.removed == ["jquery"]
        assert queue.queued() == ["theme-main", "good"]
        assert "bad" in caplog.text
