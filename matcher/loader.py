"""
matcher/loader.py — wczytywanie kontekstu i zestawów reguł z JSON.

Publiczne API:
  load_context_json(path)  -> RequestContext
  load_rules_json(path)    -> RuleSet | None
"""

from __future__ import annotations

import json
import pathlib

from data_model import RuleSet

from .context import RequestContext


def load_context_json(path: pathlib.Path) -> RequestContext:
    """
    Wczytuje kontekst żądania z pliku JSON.

    Oczekiwany format::

        {
            "is_admin": false,
            "logged_in": true,
            "flags": ["archive"],
            "archive_taxonomy": "category",
            "archive_term": "sports"
        }
    """
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Kontekst w {path.name} musi być obiektem JSON")
    return RequestContext.from_dict(raw)


def load_rules_json(path: pathlib.Path) -> RuleSet | None:
    """
    Wczytuje zestaw reguł w formacie przewodowym.

    Plik zawierający `null` oznacza brak reguł (ABSENT).
    """
    raw = json.loads(path.read_text(encoding="utf-8"))
    if raw is None:
        return None
    return RuleSet.from_wire(raw)
