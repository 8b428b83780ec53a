"""
pipeline — kolejka skryptów strony i warunkowa aktywacja.

Publiczne API:
  AssetQueue, ScriptQueue, RegisteredScript
  apply_removals, apply_manual_additions
  removal_matcher, addition_matcher
  run_render_pass, RenderReport
"""

from .queue import AssetQueue, ScriptQueue, RegisteredScript
from .activation import (
    apply_removals,
    apply_manual_additions,
    removal_matcher,
    addition_matcher,
    run_render_pass,
    RenderReport,
)

__all__ = [
    "AssetQueue",
    "ScriptQueue",
    "RegisteredScript",
    "apply_removals",
    "apply_manual_additions",
    "removal_matcher",
    "addition_matcher",
    "run_render_pass",
    "RenderReport",
]
