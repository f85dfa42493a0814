"""Effective canonical URL, permalink and body for a content item."""
from __future__ import annotations

from typing import Optional

from markupsafe import Markup

from .hooks import CANONICAL_DISCLAIMER, ENABLE_CANONICAL_DISCLAIMER, HookRegistry
from .models import ContentItem
from .sanitize import sanitize_url
from .schemas import DISCLAIMER_ON, META_CANONICAL_URL, META_DISCLAIMER, RequestContext

DISCLAIMER_TEMPLATE = Markup(
    '<p><i>Contents of this article reposted from <a href="{url}">{url}</a></i></p>'
)


class CanonicalResolver:
    """Stateless overrides applied when an item is rendered or linked.

    Each method takes the item (and context) it works on and returns the
    caller's default untouched when the item carries no override.
    """

    def __init__(self, hooks: Optional[HookRegistry] = None) -> None:
        self.hooks = hooks or HookRegistry("resolver")

    def canonical_tag(self, default_url: str, item: Optional[ContentItem]) -> str:
        if item is None:
            return default_url
        url = item.get_meta(META_CANONICAL_URL)
        if not url:
            return default_url
        return url

    def canonical_for_url(self, url: str, context: RequestContext) -> str:
        """Canonical override for callers that only know the page URL."""
        item = context.store.find_item_by_url(url)
        if item is None:
            return url
        return self.canonical_tag(url, item)

    def permalink(self, default_permalink: str, item: Optional[ContentItem]) -> str:
        if item is None:
            return default_permalink
        url = item.get_meta(META_CANONICAL_URL)
        if not url:
            return default_permalink
        return sanitize_url(url)

    def disclaimer_active(self, context: RequestContext) -> bool:
        # Only full single-item views show the disclaimer unless overridden.
        return bool(self.hooks.apply_filters(ENABLE_CANONICAL_DISCLAIMER, context.is_single, context))

    def body(self, content: str, item: Optional[ContentItem], disclaimer_enabled: bool) -> str:
        if not disclaimer_enabled or item is None:
            return content

        flag = item.get_meta(META_DISCLAIMER)
        if not flag or flag != DISCLAIMER_ON:
            return content

        url = sanitize_url(item.get_meta(META_CANONICAL_URL))
        if not url:
            return content

        fragment = str(DISCLAIMER_TEMPLATE.format(url=url))
        fragment = self.hooks.apply_filters(CANONICAL_DISCLAIMER, fragment, url, content, item.id)
        return f"{fragment}{content}"

    def render_content(self, content: str, item: Optional[ContentItem], context: RequestContext) -> str:
        """``the_content`` filter."""
        return self.body(content, item, self.disclaimer_active(context))
