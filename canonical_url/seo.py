"""Minimal SEO head layer that derives the canonical URL from the page URL alone."""
from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from .hooks import SEO_CANONICAL, HookRegistry
from .schemas import RequestContext, SeoTags


def page_canonical(page_url: str) -> str:
    """Drop query string and fragment from ``page_url``."""
    parts = urlsplit(page_url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def build_head_tags(page_url: str, hooks: HookRegistry, context: RequestContext) -> SeoTags:
    canonical = hooks.apply_filters(SEO_CANONICAL, page_canonical(page_url), context)
    return SeoTags(canonical=canonical, og_url=canonical)
