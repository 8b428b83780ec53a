"""
validator/normalizer.py — normalizacja payloadu przed walidacją.

normalize_rules():
  - Zwraca głęboką kopię zestawu reguł.
  - Nie zmienia treści merytorycznej (napisy są tylko trimowane).
  - Tryb "__mode" jest trimowany i zamieniany na małe litery.
  - Krotki argumentów zamieniane są na listy.

normalize_manual_script():
  - Trimuje src, ver, deps; domyślne in_footer=False, strategy="none".
"""

from __future__ import annotations

import copy
from typing import Any

from data_model import MODE_KEY, LoadStrategy


def normalize_rules(payload: dict[str, Any]) -> dict[str, Any]:
    """Zwraca głęboką kopię reguł z trimowanymi kluczami i argumentami."""
    out: dict[str, Any] = {}
    for raw_key, argument in copy.deepcopy(payload).items():
        key = raw_key.strip() if isinstance(raw_key, str) else raw_key
        if key == MODE_KEY:
            out[MODE_KEY] = argument.strip().lower() if isinstance(argument, str) else argument
            continue
        out[key] = _normalize_argument(argument)
    return out


def _normalize_argument(argument: Any) -> Any:
    if isinstance(argument, str):
        return argument.strip()
    if isinstance(argument, tuple):
        argument = list(argument)
    if isinstance(argument, list):
        return [a.strip() if isinstance(a, str) else a for a in argument]
    return argument


def normalize_manual_script(data: dict[str, Any]) -> dict[str, Any]:
    """Zwraca kopię danych skryptu ręcznego z wypełnionymi wartościami domyślnymi."""
    data = copy.deepcopy(data)
    for key in ("handle", "src", "ver", "deps"):
        if isinstance(data.get(key), str):
            data[key] = data[key].strip()
    data.setdefault("deps", "")
    data.setdefault("in_footer", False)
    data.setdefault("strategy", str(LoadStrategy.NONE))
    if isinstance(data.get("strategy"), str):
        data["strategy"] = data["strategy"].strip().lower() or str(LoadStrategy.NONE)
    if data.get("ver") == "":
        data["ver"] = None
    return data
