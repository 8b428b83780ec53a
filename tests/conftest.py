"""Wspólne fixture'y pytest — rejestr, konteksty żądań, magazyn i kolejka."""

from __future__ import annotations

import pytest

from catalog import Catalogs, MemoryOptionStore
from matcher import PredicateRegistry, RequestContext, build_default_registry
from pipeline import ScriptQueue


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def registry() -> PredicateRegistry:
    """Zamrożony rejestr wbudowany."""
    return build_default_registry()


@pytest.fixture
def make_ctx():
    """Fabryka kontekstów: make_ctx(is_admin=True, flags={"home"}, ...)."""
    def _make(**kwargs) -> RequestContext:
        if "flags" in kwargs:
            kwargs["flags"] = frozenset(kwargs["flags"])
        if "terms" in kwargs:
            kwargs["terms"] = {k: frozenset(v) for k, v in kwargs["terms"].items()}
        return RequestContext(**kwargs)
    return _make


@pytest.fixture
def frontend_ctx(make_ctx) -> RequestContext:
    return make_ctx()


@pytest.fixture
def admin_ctx(make_ctx) -> RequestContext:
    return make_ctx(is_admin=True, logged_in=True, can_manage=True)


@pytest.fixture
def manager_ctx(make_ctx) -> RequestContext:
    """Front-end odwiedzany przez użytkownika zarządzającego (crawler działa)."""
    return make_ctx(logged_in=True, can_manage=True)


@pytest.fixture
def store() -> MemoryOptionStore:
    return MemoryOptionStore()


@pytest.fixture
def catalogs(store) -> Catalogs:
    return Catalogs(store)


@pytest.fixture
def queue() -> ScriptQueue:
    """Kolejka z dwoma zarejestrowanymi i dodanymi skryptami."""
    q = ScriptQueue()
    q.register("jquery", "https://example.com/wp-includes/js/jquery/jquery.min.js", [], "3.7.1", False)
    q.enqueue("jquery")
    q.register("theme-main", "https://example.com/wp-content/themes/t/main.js", ["jquery"], "1.2", True)
    q.enqueue("theme-main")
    return q
