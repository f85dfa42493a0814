"""Wires the canonical URL editor and resolver into the host's extension points."""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, NamedTuple, Optional

from . import hooks as hook_names
from .editor import MetadataEditor
from .hooks import HookRegistry
from .models import ContentItem
from .resolver import CanonicalResolver
from .schemas import RequestContext

logger = logging.getLogger(__name__)


class HookSpec(NamedTuple):
    hook_name: str
    handler: str
    kind: str = "filter"
    priority: int = hook_names.DEFAULT_PRIORITY


ADMIN_HOOKS: tuple[HookSpec, ...] = (
    HookSpec(hook_names.EDIT_FORM_PANELS, "edit_panel"),
    HookSpec(hook_names.SAVE_ITEM, "save_item", kind="action"),
)

PUBLIC_HOOKS: tuple[HookSpec, ...] = (
    HookSpec(hook_names.GET_CANONICAL_URL, "canonical_url"),
    HookSpec(hook_names.SEO_CANONICAL, "seo_canonical_url"),
    HookSpec(hook_names.THE_CONTENT, "content"),
    HookSpec(hook_names.ITEM_LINK, "item_link"),
)


class CanonicalUrlPlugin:
    """Registers the feature's handlers: admin hooks on the admin registry, public hooks on the public one."""

    def __init__(
        self,
        editor: Optional[MetadataEditor] = None,
        resolver: Optional[CanonicalResolver] = None,
    ) -> None:
        self.editor = editor or MetadataEditor()
        self.resolver = resolver or CanonicalResolver()

    def register(self, registry: HookRegistry, specs: tuple[HookSpec, ...]) -> None:
        for spec in specs:
            callback: Callable[..., Any] = getattr(self, spec.handler)
            if spec.kind == "action":
                registry.add_action(spec.hook_name, callback, spec.priority)
            else:
                registry.add_filter(spec.hook_name, callback, spec.priority)
        logger.info("Registered %d canonical URL hooks on %s", len(specs), registry.name)

    def register_admin(self, registry: HookRegistry) -> None:
        self.register(registry, ADMIN_HOOKS)

    def register_public(self, registry: HookRegistry) -> None:
        self.register(registry, PUBLIC_HOOKS)

    # Admin handlers

    def edit_panel(self, panels: list, item: ContentItem, context: RequestContext) -> list:
        return self.editor.panel(panels, item, context)

    def save_item(self, item_id: Any, submitted: Mapping[str, Any], context: RequestContext) -> None:
        self.editor.on_save_item(item_id, submitted, context)

    # Public handlers

    def canonical_url(self, default_url: str, item: Optional[ContentItem], context: RequestContext) -> str:
        return self.resolver.canonical_tag(default_url, item)

    def seo_canonical_url(self, url: str, context: RequestContext) -> str:
        return self.resolver.canonical_for_url(url, context)

    def content(self, content: str, item: Optional[ContentItem], context: RequestContext) -> str:
        return self.resolver.render_content(content, item, context)

    def item_link(self, default_permalink: str, item: Optional[ContentItem], context: RequestContext) -> str:
        return self.resolver.permalink(default_permalink, item)
