"""html_parser/parser.py — odczyt kolejki skryptów z wyrenderowanej strony HTML."""

from __future__ import annotations

import logging
import pathlib
import re
import unicodedata
from urllib.parse import unquote_plus, urljoin, urlsplit, urlunsplit

import requests
from bs4 import BeautifulSoup, Tag

from data_model import LoadStrategy
from pipeline import ScriptQueue

logger = logging.getLogger(__name__)

# WordPress drukuje <script id="<handle>-js" src="…">
_WP_ID_RE = re.compile(r"^(?P<handle>.+)-js$")

# Typy skryptów wykonywalnych (brak atrybutu type też się liczy)
_JS_TYPES = {"text/javascript", "application/javascript", "module"}

_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
}


def _slugify(text: str, max_len: int = 60) -> str:
    """Zamień nazwę pliku na bezpieczny handle ASCII."""
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^\w\s.-]", "", text).strip().lower()
    text = re.sub(r"[\s_.]+", "-", text)
    text = re.sub(r"-{2,}", "-", text)
    return text[:max_len].strip("-") or "script"


def _split_version(src: str) -> tuple[str, str | None]:
    """Oddziela parametr ver od adresu: (adres bez ver, wersja)."""
    parts = urlsplit(src)
    version = None
    rest: list[str] = []
    # pozostałe pary zostają w postaci źródłowej
    for pair in parts.query.split("&"):
        key, _, value = pair.partition("=")
        if unquote_plus(key) == "ver":
            version = version or unquote_plus(value)
        elif pair:
            rest.append(pair)
    clean = urlunsplit((parts.scheme, parts.netloc, parts.path, "&".join(rest), parts.fragment))
    return clean, version or None


def _handle_for(tag: Tag, src: str) -> str:
    m = _WP_ID_RE.match(str(tag.get("id") or ""))
    if m:
        return m.group("handle")
    name = pathlib.PurePosixPath(urlsplit(src).path).name
    if name.endswith(".js"):
        name = name[:-3]
    return _slugify(name)


def _strategy_for(tag: Tag) -> LoadStrategy:
    declared = LoadStrategy.coerce(str(tag.get("data-wp-strategy") or "").strip().lower())
    if declared != LoadStrategy.NONE:
        return declared
    if tag.has_attr("async"):
        return LoadStrategy.ASYNC
    if tag.has_attr("defer"):
        return LoadStrategy.DEFER
    return LoadStrategy.NONE


def parse_scripts(html: str, base_url: str) -> ScriptQueue:
    """
    Buduje ScriptQueue z tagów <script src> strony.

    - handle:    z id="<handle>-js", inaczej z nazwy pliku
    - version:   z parametru ver adresu
    - in_footer: skrypt poza <head>
    - strategy:  data-wp-strategy, async albo defer
    Skrypty inline i nie-JavaScript są pomijane.
    """
    soup = BeautifulSoup(html, "html.parser")
    queue = ScriptQueue()

    for tag in soup.find_all("script", src=True):
        script_type = str(tag.get("type") or "").strip().lower()
        if script_type and script_type not in _JS_TYPES:
            continue

        src, version = _split_version(urljoin(base_url, str(tag["src"]).strip()))
        handle = _handle_for(tag, src)
        if queue.has(handle):
            n = 2
            while queue.has(f"{handle}-{n}"):
                n += 1
            handle = f"{handle}-{n}"

        in_footer = tag.find_parent("head") is None
        queue.register(handle, src, [], version, in_footer)
        queue.set_strategy(handle, _strategy_for(tag))
        queue.enqueue(handle)

    logger.debug("Znaleziono %d skryptów na %s", len(queue), base_url)
    return queue


def fetch_script_queue(url: str) -> ScriptQueue:
    """Pobiera stronę z podanego URL i zwraca jej kolejkę skryptów."""
    resp = requests.get(url, timeout=30, headers=_HEADERS)
    resp.raise_for_status()
    resp.encoding = resp.apparent_encoding or "utf-8"
    return parse_scripts(resp.text, resp.url or url)
