"""
pipeline/activation.py — warunkowa aktywacja skryptów w kolejce strony.

apply_manual_additions(manual, ctx, queue, matcher)  — wstrzykuje skrypty ręczne
apply_removals(removed, ctx, queue, matcher)         — usuwa skrypty z kolejki
run_render_pass(catalogs, ctx, queue, ...)           — pełny przebieg renderowania

Werdykt dla rekordu bez reguł jest asymetryczny:
  removal_matcher()  → is_frontend_request (tylko front-end)
  addition_matcher() → always_true (ładuj zawsze)

Obie operacje są idempotentne w obrębie jednego renderowania.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from data_model import CatalogName, Handle, LoadStrategy, ManagedScript
from matcher import PredicateRegistry, RuleMatcher, always_true, is_frontend_request
from validator import is_valid_source_url

from catalog import Catalogs, SiteLayout, crawl_queue

from .queue import AssetQueue

logger = logging.getLogger(__name__)


def removal_matcher(registry: PredicateRegistry) -> RuleMatcher:
    return RuleMatcher(registry, is_frontend_request)


def addition_matcher(registry: PredicateRegistry) -> RuleMatcher:
    return RuleMatcher(registry, always_true)


# ---------------------------------------------------------------------------
# Usuwanie
# ---------------------------------------------------------------------------

def apply_removals(
    removed: Mapping[Handle, ManagedScript],
    context: Any,
    queue: AssetQueue,
    matcher: RuleMatcher,
) -> list[Handle]:
    """
    Usuwa z kolejki (dequeue + deregister) skrypty, których reguły pasują.

    Returns:
        Handle'e, których reguły pasowały (także te nieobecne w kolejce).
    """
    matched: list[Handle] = []
    for handle, record in removed.items():
        if not matcher.matches(record.rules, context):
            continue
        if queue.has(handle):
            logger.debug("Usunięto skrypt %s", handle)
        queue.remove(handle)
        matched.append(handle)
    return matched


# ---------------------------------------------------------------------------
# Dodawanie ręcznych
# ---------------------------------------------------------------------------

def apply_manual_additions(
    manual: Mapping[Handle, ManagedScript],
    context: Any,
    queue: AssetQueue,
    matcher: RuleMatcher,
) -> list[Handle]:
    """
    Rejestruje i dodaje do kolejki skrypty ręczne, których reguły pasują.

    Rekord z pustym handle albo niepoprawnym src jest pomijany
    (ostrzeżenie w logu); pozostałe są przetwarzane dalej.

    Returns:
        Handle'e dodane do kolejki.
    """
    added: list[Handle] = []
    for handle, record in manual.items():
        if not matcher.matches(record.rules, context):
            continue

        if not isinstance(handle, str) or not handle.strip():
            logger.warning("Pominięto skrypt ręczny bez handle: %r", record.src)
            continue
        if not is_valid_source_url(record.src):
            logger.warning("Pominięto skrypt ręczny %s: nieprawidłowy adres %r", handle, record.src)
            continue

        queue.register(
            handle,
            record.src,
            record.dependency_list,
            record.version,
            record.in_footer,
        )
        queue.enqueue(handle)
        if record.strategy in (LoadStrategy.ASYNC, LoadStrategy.DEFER):
            queue.set_strategy(handle, record.strategy)
        added.append(handle)
        logger.debug("Dodano skrypt ręczny %s", handle)
    return added


# ---------------------------------------------------------------------------
# Pełny przebieg renderowania
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class RenderReport:
    """Wynik run_render_pass()."""
    added: list[Handle] = field(default_factory=list)
    removed: list[Handle] = field(default_factory=list)
    discovered: list[Handle] = field(default_factory=list)


def run_render_pass(
    catalogs: Catalogs,
    context: Any,
    queue: Any,
    registry: PredicateRegistry,
    *,
    layout: SiteLayout | None = None,
    discover: bool = True,
    now: int | None = None,
) -> RenderReport:
    """
    Jeden przebieg renderowania strony.

    Kolejność: skrypty ręczne → usuwanie → odkrywanie z kolejki.
    Odkrywanie wymaga kolejki z queued() / registered() (np. ScriptQueue).

    Raises:
        CatalogCorruptError gdy magazyn zwrócił uszkodzony katalog.
    """
    report = RenderReport()

    manual = catalogs.managed(CatalogName.MANUAL)
    removed = catalogs.managed(CatalogName.REMOVED)

    report.added = apply_manual_additions(manual, context, queue, addition_matcher(registry))
    report.removed = apply_removals(removed, context, queue, removal_matcher(registry))

    if discover:
        report.discovered = crawl_queue(catalogs, queue, context, layout, now=now)

    return report
