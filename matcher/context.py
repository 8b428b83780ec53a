"""
matcher/context.py — kontekst żądania (RequestContext).

Kontekst jest materializowany raz na żądanie i niezmienny do jego końca.
Silnik go nie czyta — przekazuje go tylko do predykatów z rejestru.

Flagi trasy (flags):
  home, front_page, search, 404, archive, paged, privacy_policy,
  comments_open, woocommerce, shop, product, cart, checkout,
  account_page, product_category, product_tag
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

ROUTE_FLAGS: frozenset[str] = frozenset({
    "home", "front_page", "search", "404", "archive", "paged",
    "privacy_policy", "comments_open",
    "woocommerce", "shop", "product", "cart", "checkout", "account_page",
    "product_category", "product_tag",
})


@dataclass(frozen=True, slots=True)
class RequestContext:
    """
    Klasyfikacja bieżącego żądania.

    - is_admin:         żądanie panelu administracyjnego (także AJAX z panelu)
    - is_ajax:          żądanie AJAX
    - logged_in:        czy użytkownik jest zalogowany
    - can_manage:       czy użytkownik może zarządzać ustawieniami
    - is_mobile:        klasa urządzenia
    - flags:            flagi trasy (ROUTE_FLAGS)
    - post_type:        typ rozwiązanej treści pojedynczej (None poza widokiem pojedynczym)
    - post_id:          identyfikator treści pojedynczej
    - terms:            taksonomia → slugi/ID termów przypisanych do treści
    - archive_taxonomy: taksonomia archiwum termu (np. "category")
    - archive_term:     slug termu archiwum (np. "news")
    - archive_term_id:  ID termu archiwum
    - page_template:    plik szablonu strony (np. "templates/full-width.php")
    - wc_endpoint:      aktywny endpoint WooCommerce (np. "orders"), None poza endpointem
    - url:              adres żądania (tylko informacyjnie)
    """
    is_admin: bool = False
    is_ajax: bool = False
    logged_in: bool = False
    can_manage: bool = False
    is_mobile: bool = False
    flags: frozenset[str] = frozenset()
    post_type: str | None = None
    post_id: int | None = None
    terms: dict[str, frozenset[str]] = field(default_factory=dict)
    archive_taxonomy: str | None = None
    archive_term: str | None = None
    archive_term_id: int | None = None
    page_template: str | None = None
    wc_endpoint: str | None = None
    url: str = ""

    def has(self, flag: str) -> bool:
        return flag in self.flags

    @property
    def is_frontend(self) -> bool:
        return not self.is_admin

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "RequestContext":
        """
        Buduje kontekst ze słownika (np. po json.loads).

        Nieznane flagi trasy podnoszą ValueError, żeby literówka
        nie dawała po cichu fałszywego kontekstu. Pojedynczy term
        podany jako napis (np. {"category": "news"}) to jeden term.
        """
        flags = frozenset(str(f) for f in raw.get("flags", []))
        unknown = flags - ROUTE_FLAGS
        if unknown:
            raise ValueError(f"Nieznane flagi trasy: {', '.join(sorted(unknown))}")

        terms = {
            str(tax): frozenset([str(values)] if isinstance(values, (str, int)) else (str(t) for t in values))
            for tax, values in (raw.get("terms") or {}).items()
        }
        term_id = raw.get("archive_term_id")
        post_id = raw.get("post_id")
        return cls(
            is_admin=bool(raw.get("is_admin", False)),
            is_ajax=bool(raw.get("is_ajax", False)),
            logged_in=bool(raw.get("logged_in", False)),
            can_manage=bool(raw.get("can_manage", False)),
            is_mobile=bool(raw.get("is_mobile", False)),
            flags=flags,
            post_type=raw.get("post_type"),
            post_id=int(post_id) if post_id is not None else None,
            terms=terms,
            archive_taxonomy=raw.get("archive_taxonomy"),
            archive_term=raw.get("archive_term"),
            archive_term_id=int(term_id) if term_id is not None else None,
            page_template=raw.get("page_template"),
            wc_endpoint=raw.get("wc_endpoint") or None,
            url=str(raw.get("url", "")),
        )
