"""
catalog — magazyn opcji, katalogi skryptów, odkrywanie i operacje operatora.

Moduły:
  store       — OptionStore, MemoryOptionStore, PostgresOptionStore
  catalogs    — Catalogs, CatalogCorruptError
  discovery   — SiteLayout, record_if_new, crawl_queue, metadane plików
  transitions — dequeue, restore, forget, manual CRUD, reguły
"""

from .store import OptionStore, MemoryOptionStore, PostgresOptionStore
from .catalogs import Catalogs, CatalogCorruptError
from .discovery import (
    SiteLayout,
    record_if_new,
    crawl_queue,
    resolve_local_file,
    file_metadata,
)
from .transitions import (
    UnknownHandleError,
    DuplicateHandleError,
    InvalidRuleSetError,
    default_rules,
    dequeue,
    restore,
    forget,
    clear_discovered,
    register_manual,
    update_manual,
    remove_manual,
    get_rules,
    set_rules,
    clear_rules,
    format_rule_set,
)

__all__ = [
    # store
    "OptionStore",
    "MemoryOptionStore",
    "PostgresOptionStore",
    # catalogs
    "Catalogs",
    "CatalogCorruptError",
    # discovery
    "SiteLayout",
    "record_if_new",
    "crawl_queue",
    "resolve_local_file",
    "file_metadata",
    # transitions
    "UnknownHandleError",
    "DuplicateHandleError",
    "InvalidRuleSetError",
    "default_rules",
    "dequeue",
    "restore",
    "forget",
    "clear_discovered",
    "register_manual",
    "update_manual",
    "remove_manual",
    "get_rules",
    "set_rules",
    "clear_rules",
    "format_rule_set",
]
