"""
matcher/builtins.py — wbudowane predykaty kontekstu strony.

Słownictwo odpowiada znacznikom warunkowym WordPressa dostępnym
w edytorze reguł. build_default_registry() zwraca zamrożony rejestr.

  bez argumentów: is_frontend, is_admin, is_logged_out, is_user_logged_in,
                  is_mobile, is_home, is_front_page, comments_open,
                  is_search, is_404, is_privacy_policy, is_paged,
                  is_archive, is_woocommerce, is_shop, is_product_category,
                  is_product_tag, is_product, is_cart, is_checkout,
                  is_account_page
  jeden argument: is_singular(post_type?), is_page_template(template?),
                  is_wc_endpoint_url(endpoint?)
  wiele:          is_tax(taxonomy?, term?), has_term(term?, taxonomy?)
"""

from __future__ import annotations

from data_model import PredicateArity

from .context import RequestContext
from .registry import PredicateRegistry

# Predykat używany jako domyślna reguła dla świeżo usuniętych skryptów
FRONTEND_PREDICATE = "is_frontend"


# ---------------------------------------------------------------------------
# Predykaty bez argumentów
# ---------------------------------------------------------------------------

def is_frontend_request(ctx: RequestContext) -> bool:
    """Żądanie spoza panelu administracyjnego."""
    return not ctx.is_admin


def _flag(name: str):
    def check(ctx: RequestContext) -> bool:
        return ctx.has(name)
    check.__name__ = f"is_{name}"
    return check


# ---------------------------------------------------------------------------
# Predykaty z argumentami
# ---------------------------------------------------------------------------

def _term_matches(term: object, slug: str | None, term_id: int | None) -> bool:
    value = str(term)
    return value == slug or (term_id is not None and value == str(term_id))


def is_singular(ctx: RequestContext, post_type: object = "") -> bool:
    if ctx.post_type is None:
        return False
    if post_type in ("", None):
        return True
    return ctx.post_type == str(post_type)


def is_tax(ctx: RequestContext, taxonomy: object = "", term: object = "") -> bool:
    if ctx.archive_taxonomy is None:
        return False
    if taxonomy not in ("", None) and ctx.archive_taxonomy != str(taxonomy):
        return False
    if term in ("", None):
        return True
    return _term_matches(term, ctx.archive_term, ctx.archive_term_id)


def has_term(ctx: RequestContext, term: object = "", taxonomy: object = "") -> bool:
    if ctx.post_type is None:
        return False
    if taxonomy in ("", None):
        assigned = frozenset().union(*ctx.terms.values()) if ctx.terms else frozenset()
    else:
        assigned = ctx.terms.get(str(taxonomy), frozenset())
    if term in ("", None):
        return bool(assigned)
    return str(term) in assigned


def is_page_template(ctx: RequestContext, template: object = "") -> bool:
    if ctx.page_template is None:
        return False
    if template in ("", None):
        return True
    return ctx.page_template == str(template)


def is_wc_endpoint_url(ctx: RequestContext, endpoint: object = "") -> bool:
    if ctx.wc_endpoint is None:
        return False
    if endpoint in ("", None):
        return True
    return ctx.wc_endpoint == str(endpoint)


# ---------------------------------------------------------------------------
# Rejestr domyślny
# ---------------------------------------------------------------------------

_FLAG_PREDICATES: list[tuple[str, str, str]] = [
    # (nazwa predykatu, flaga, opis)
    ("is_home",             "home",             "Strona z listą wpisów"),
    ("is_front_page",       "front_page",       "Strona główna witryny"),
    ("comments_open",       "comments_open",    "Komentarze otwarte dla bieżącej treści"),
    ("is_search",           "search",           "Wyniki wyszukiwania"),
    ("is_404",              "404",              "Strona nie znaleziona"),
    ("is_privacy_policy",   "privacy_policy",   "Strona polityki prywatności"),
    ("is_paged",            "paged",            "Kolejna strona paginacji"),
    ("is_archive",          "archive",          "Dowolne archiwum"),
    ("is_woocommerce",      "woocommerce",      "Strona WooCommerce"),
    ("is_shop",             "shop",             "Sklep WooCommerce"),
    ("is_product_category", "product_category", "Archiwum kategorii produktu"),
    ("is_product_tag",      "product_tag",      "Archiwum tagu produktu"),
    ("is_product",          "product",          "Strona produktu"),
    ("is_cart",             "cart",             "Koszyk"),
    ("is_checkout",         "checkout",         "Zamówienie"),
    ("is_account_page",     "account_page",     "Strona konta klienta"),
]


def build_default_registry() -> PredicateRegistry:
    """Buduje i zamraża rejestr z pełnym słownictwem wbudowanym."""
    r = PredicateRegistry()

    r.register(FRONTEND_PREDICATE, PredicateArity.NONE, is_frontend_request,
               meaning_pl="Żądanie spoza panelu administracyjnego")
    r.register("is_admin", PredicateArity.NONE, lambda ctx: ctx.is_admin,
               meaning_pl="Żądanie panelu administracyjnego")
    r.register("is_logged_out", PredicateArity.NONE, lambda ctx: not ctx.logged_in,
               meaning_pl="Użytkownik niezalogowany")
    r.register("is_user_logged_in", PredicateArity.NONE, lambda ctx: ctx.logged_in,
               meaning_pl="Użytkownik zalogowany")
    r.register("is_mobile", PredicateArity.NONE, lambda ctx: ctx.is_mobile,
               meaning_pl="Urządzenie mobilne")

    for name, flag, meaning in _FLAG_PREDICATES:
        r.register(name, PredicateArity.NONE, _flag(flag), meaning_pl=meaning)

    r.register("is_singular", PredicateArity.ONE, is_singular,
               meaning_pl="Widok pojedynczej treści (opcjonalnie danego typu)")
    r.register("is_page_template", PredicateArity.ONE, is_page_template,
               meaning_pl="Strona używa szablonu (opcjonalnie danego pliku)")
    r.register("is_wc_endpoint_url", PredicateArity.ONE, is_wc_endpoint_url,
               meaning_pl="Endpoint WooCommerce (opcjonalnie dany, np. orders)")
    r.register("is_tax", PredicateArity.MANY, is_tax, max_args=2,
               meaning_pl="Archiwum termu taksonomii (taxonomy, term)")
    r.register("has_term", PredicateArity.MANY, has_term, max_args=2,
               meaning_pl="Treść ma przypisany term (term, taxonomy)")

    return r.freeze()
