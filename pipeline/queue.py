"""
pipeline/queue.py — kolejka skryptów strony (odpowiednik WP_Scripts).

AssetQueue — protokół pięciu operacji wywoływanych przez potok aktywacji:
  has, remove, register, enqueue, set_strategy

ScriptQueue — implementacja w pamięci:
  - register() nie nadpisuje istniejącej rejestracji (pierwsza wygrywa)
  - enqueue() dodaje handle tylko raz, zachowując kolejność
  - remove() = dequeue + deregister; brak handle'a to no-op
  - queued() / registered() — odczyt dla katalogu odkrytych
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol

from data_model import Handle, LoadStrategy, parse_dependencies


class AssetQueue(Protocol):
    def has(self, handle: Handle) -> bool: ...

    def remove(self, handle: Handle) -> None: ...

    def register(
        self,
        handle: Handle,
        src: str,
        deps: list[str],
        version: str | None,
        in_footer: bool,
    ) -> bool: ...

    def enqueue(self, handle: Handle) -> None: ...

    def set_strategy(self, handle: Handle, strategy: LoadStrategy) -> None: ...


@dataclass(slots=True)
class RegisteredScript:
    """
    Zarejestrowany skrypt.

    - version: None oznacza brak parametru ver w adresie
    - extra:   dodatkowe dane (group=1 dla stopki, strategy=async|defer)
    """
    handle: Handle
    src: str
    deps: list[str] = field(default_factory=list)
    version: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def in_footer(self) -> bool:
        return bool(self.extra.get("group"))

    @property
    def strategy(self) -> LoadStrategy:
        return LoadStrategy.coerce(self.extra.get("strategy"))


class ScriptQueue:
    """Kolejka skryptów jednego renderowania strony."""

    def __init__(self) -> None:
        self._registered: dict[Handle, RegisteredScript] = {}
        self._queue: list[Handle] = []

    # ------------------------------------------------------------------
    # AssetQueue
    # ------------------------------------------------------------------

    def has(self, handle: Handle) -> bool:
        return handle in self._registered or handle in self._queue

    def remove(self, handle: Handle) -> None:
        if handle in self._queue:
            self._queue.remove(handle)
        self._registered.pop(handle, None)

    def register(
        self,
        handle: Handle,
        src: str,
        deps: list[str] | None = None,
        version: str | None = None,
        in_footer: bool = False,
    ) -> bool:
        if handle in self._registered:
            return False
        script = RegisteredScript(handle=handle, src=src, deps=list(deps or []), version=version)
        if in_footer:
            script.extra["group"] = 1
        self._registered[handle] = script
        return True

    def enqueue(self, handle: Handle) -> None:
        if handle in self._registered and handle not in self._queue:
            self._queue.append(handle)

    def set_strategy(self, handle: Handle, strategy: LoadStrategy) -> None:
        script = self._registered.get(handle)
        if script is None:
            return
        if strategy == LoadStrategy.NONE:
            script.extra.pop("strategy", None)
        else:
            script.extra["strategy"] = str(strategy)

    # ------------------------------------------------------------------
    # Odczyt
    # ------------------------------------------------------------------

    def queued(self) -> list[Handle]:
        return list(self._queue)

    def registered(self, handle: Handle) -> RegisteredScript | None:
        return self._registered.get(handle)

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self):
        return iter(self.queued())

    # ------------------------------------------------------------------
    # Import / eksport (JSON)
    # ------------------------------------------------------------------

    @classmethod
    def from_items(cls, items: Iterable[dict[str, Any]]) -> "ScriptQueue":
        """
        Buduje kolejkę z listy obiektów::

            [{"handle": "jquery", "src": "https://…/jquery.js", "ver": "3.7.1",
              "deps": [], "in_footer": false, "strategy": "defer",
              "enqueued": true}]

        Raises:
            ValueError gdy element nie jest obiektem lub nie ma handle.
        """
        queue = cls()
        for i, item in enumerate(items):
            if not isinstance(item, dict) or not item.get("handle"):
                raise ValueError(f"Element kolejki #{i} musi być obiektem z polem 'handle'")
            handle = str(item["handle"])
            ver = item.get("ver")
            queue.register(
                handle,
                str(item.get("src") or ""),
                parse_dependencies(item.get("deps")),
                str(ver) if ver not in (None, "", False) else None,
                bool(item.get("in_footer", False)),
            )
            queue.set_strategy(handle, LoadStrategy.coerce(item.get("strategy")))
            if item.get("enqueued", True):
                queue.enqueue(handle)
        return queue

    def to_items(self) -> list[dict[str, Any]]:
        """Zwraca zarejestrowane skrypty; kolejne w kolejce są oznaczone enqueued=True."""
        out = []
        for handle, script in self._registered.items():
            out.append({
                "handle":    handle,
                "src":       script.src,
                "ver":       script.version,
                "deps":      list(script.deps),
                "in_footer": script.in_footer,
                "strategy":  str(script.strategy),
                "enqueued":  handle in self._queue,
            })
        return out
