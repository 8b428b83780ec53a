"""
catalog/discovery.py — katalog odkrytych skryptów.

record_if_new(catalogs, entry)          — dopisuje wpis, jeśli handle nie
                                          występuje w żadnym z trzech katalogów
crawl_queue(catalogs, queue, ctx, ...)  — przegląd kolejki renderowania,
                                          jeden zapis katalogu na przebieg
resolve_local_file(src, layout)         — ścieżka pliku lokalnego lub None
file_metadata(path)                     — (size, mtime) lub (None, None)

Pierwszy zapis wygrywa: metadane istniejącego wpisu nigdy nie są
odświeżane. Ponowne odkrycie wymaga usunięcia wpisu przez operatora.
"""

from __future__ import annotations

import logging
import os
import pathlib
import time
from dataclasses import dataclass, replace
from typing import Any, Protocol
from urllib.parse import urlsplit

from data_model import CatalogName, Handle, LoadStrategy, ScriptEntry
from matcher import is_frontend_request

from .catalogs import Catalogs

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Konfiguracja witryny
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SiteLayout:
    """
    Adresy i katalogi witryny potrzebne do odczytu metadanych plików.

    - site_url:    adres główny, np. "https://example.com"
    - content_url: adres katalogu treści, np. "https://example.com/wp-content"
    - content_dir: katalog treści na dysku
    - abspath:     katalog główny instalacji na dysku
    """
    site_url: str = ""
    content_url: str = ""
    content_dir: pathlib.Path | None = None
    abspath: pathlib.Path | None = None

    @classmethod
    def from_env(cls) -> "SiteLayout":
        """Czyta PSA_SITE_URL, PSA_CONTENT_URL, PSA_CONTENT_DIR, PSA_ABSPATH."""
        site_url = os.getenv("PSA_SITE_URL", "").rstrip("/")
        content_url = os.getenv("PSA_CONTENT_URL", "").rstrip("/")
        if site_url and not content_url:
            content_url = f"{site_url}/wp-content"
        abspath = os.getenv("PSA_ABSPATH")
        content_dir = os.getenv("PSA_CONTENT_DIR")
        if abspath and not content_dir:
            content_dir = os.path.join(abspath, "wp-content")
        return cls(
            site_url=site_url,
            content_url=content_url,
            content_dir=pathlib.Path(content_dir) if content_dir else None,
            abspath=pathlib.Path(abspath) if abspath else None,
        )


# ---------------------------------------------------------------------------
# Metadane pliku lokalnego
# ---------------------------------------------------------------------------

def _readable_file(path: pathlib.Path) -> bool:
    try:
        return path.is_file() and os.access(path, os.R_OK)
    except OSError:
        return False


def resolve_local_file(src: str, layout: SiteLayout) -> pathlib.Path | None:
    """
    Zamienia adres skryptu na ścieżkę pliku lokalnego.

    Tylko adresy pod site_url. Najpierw content_url → content_dir,
    potem ścieżka adresu względem abspath. None gdy plik nie istnieje
    lub nie da się go odczytać.
    """
    if not src or not layout.site_url or not src.startswith(layout.site_url):
        return None

    path = urlsplit(src).path
    if not path:
        return None

    if layout.content_dir is not None and layout.content_url:
        content_path = urlsplit(layout.content_url).path.rstrip("/")
        if path.startswith(content_path + "/"):
            candidate = layout.content_dir / path[len(content_path):].lstrip("/")
            if _readable_file(candidate):
                return candidate

    if layout.abspath is not None:
        site_path = urlsplit(layout.site_url).path.rstrip("/")
        relative = path[len(site_path):] if site_path and path.startswith(site_path) else path
        candidate = layout.abspath / relative.lstrip("/")
        if _readable_file(candidate):
            return candidate

    return None


def file_metadata(path: pathlib.Path | None) -> tuple[int | None, int | None]:
    """(rozmiar w bajtach, mtime epoch) albo (None, None)."""
    if path is None:
        return None, None
    try:
        st = path.stat()
    except OSError as e:
        logger.debug("Brak metadanych pliku %s: %s", path, e)
        return None, None
    return st.st_size, int(st.st_mtime)


# ---------------------------------------------------------------------------
# record_if_new
# ---------------------------------------------------------------------------

def record_if_new(
    catalogs: Catalogs,
    entry: ScriptEntry,
    *,
    now: int | None = None,
) -> bool:
    """
    Dopisuje wpis do katalogu odkrytych.

    No-op (False), gdy handle jest już w katalogu odkrytych, usuwanych
    albo ręcznych. Pole found ustawiane jest na bieżący czas.
    """
    if catalogs.owner_of(entry.handle) is not None:
        return False

    found = catalogs.raw(CatalogName.DISCOVERED)
    stamped = replace(entry, found=now if now is not None else int(time.time()))
    found[entry.handle] = stamped.to_record()
    catalogs.write(CatalogName.DISCOVERED, found)
    logger.debug("Odkryto skrypt %s (%s)", entry.handle, entry.src)
    return True


# ---------------------------------------------------------------------------
# crawl_queue
# ---------------------------------------------------------------------------

class QueueView(Protocol):
    """Odczyt kolejki renderowania wymagany przez crawl_queue()."""

    def queued(self) -> list[Handle]: ...

    def registered(self, handle: Handle) -> Any: ...


def crawl_queue(
    catalogs: Catalogs,
    queue: QueueView,
    context: Any,
    layout: SiteLayout | None = None,
    *,
    can_manage: bool | None = None,
    now: int | None = None,
) -> list[Handle]:
    """
    Rejestruje w katalogu odkrytych nowe skrypty z kolejki.

    Działa tylko dla żądań front-endu użytkownika zarządzającego
    (can_manage=None → context.can_manage). Skrypty obecne w dowolnym
    katalogu i handle'e bez rejestracji są pomijane.

    Returns:
        Lista nowo zapisanych handle'i (w kolejności kolejki).
    """
    if can_manage is None:
        can_manage = bool(getattr(context, "can_manage", False))
    if not is_frontend_request(context) or not can_manage:
        return []

    layout = layout or SiteLayout()
    known = catalogs.all_handles()
    stamp = now if now is not None else int(time.time())
    found = catalogs.raw(CatalogName.DISCOVERED)
    added: list[Handle] = []

    for handle in queue.queued():
        if handle in known or handle in found:
            continue
        script = queue.registered(handle)
        if script is None:
            continue

        local = resolve_local_file(script.src, layout)
        if local is None:
            logger.debug("Skrypt %s nie jest plikiem lokalnym: %s", handle, script.src)
        size, mtime = file_metadata(local)

        strategy = script.strategy
        entry = ScriptEntry(
            handle=handle,
            src=script.src,
            version=script.version,
            deps=list(script.deps),
            in_footer=script.in_footer,
            strategy=strategy if strategy in (LoadStrategy.ASYNC, LoadStrategy.DEFER) else LoadStrategy.NONE,
            size=size,
            mtime=mtime,
            found=stamp,
        )
        found[handle] = entry.to_record()
        added.append(handle)
        logger.debug("Odkryto skrypt %s (%s)", handle, script.src)

    if added:
        catalogs.write(CatalogName.DISCOVERED, found)
    return added
