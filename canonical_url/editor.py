"""Edit-screen panel for the canonical URL and reposted-from disclaimer fields."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from jinja2 import Environment

from .models import ContentItem
from .sanitize import sanitize_url
from .schemas import (
    DISCLAIMER_ON,
    META_CANONICAL_URL,
    META_DISCLAIMER,
    CanonicalSubmission,
    EditPanel,
    RequestContext,
)
from .store import ContentStore
from .templating import TEMPLATES

logger = logging.getLogger(__name__)

PANEL_ID = "canonical-url-panel"
PANEL_TITLE = "Canonical URL"
PANEL_TEMPLATE = "canonical_panel.html"


def _coerce_item_id(item_id: Any) -> Optional[int]:
    if isinstance(item_id, bool) or item_id is None:
        return None
    if isinstance(item_id, int):
        return item_id if item_id > 0 else None
    text = str(item_id).strip()
    if not text.isdigit():
        return None
    value = int(text)
    return value if value > 0 else None


class MetadataEditor:
    """Maps the panel's form fields to and from an item's metadata store."""

    def __init__(self, environment: Optional[Environment] = None) -> None:
        self.environment = environment or TEMPLATES.env

    def render(self, item: ContentItem) -> str:
        url = item.get_meta(META_CANONICAL_URL)
        disclaimer = item.get_meta(META_DISCLAIMER)
        template = self.environment.get_template(PANEL_TEMPLATE)
        return template.render(
            url_field=META_CANONICAL_URL,
            disclaimer_field=META_DISCLAIMER,
            canonical_url=url,
            disclaimer_value=DISCLAIMER_ON,
            disclaimer_checked=disclaimer == DISCLAIMER_ON,
        )

    def panel(self, panels: list[EditPanel], item: ContentItem, context: RequestContext) -> list[EditPanel]:
        """``edit_form_panels`` filter: add this panel to the edit screen."""
        return [*panels, EditPanel(PANEL_ID, PANEL_TITLE, self.render(item))]

    def save(self, item_id: Any, submitted: Mapping[str, Any], store: ContentStore) -> None:
        """Persist the submitted fields for ``item_id``.

        An empty URL means "leave things alone", not "clear the override".
        The disclaimer flag is stored as ``"true"`` or removed outright.
        """

        target_id = _coerce_item_id(item_id)
        if target_id is None:
            logger.debug("Skipping canonical URL save for invalid item id %r", item_id)
            return

        fields = CanonicalSubmission.model_validate(dict(submitted))
        if not fields.canonical_url:
            logger.debug("No canonical URL submitted for item %s", target_id)
            return

        url = sanitize_url(fields.canonical_url)
        if not store.update_meta(target_id, META_CANONICAL_URL, url):
            logger.debug("Item %s not found; canonical URL not saved", target_id)
            return

        if fields.disclaimer_enabled:
            store.update_meta(target_id, META_DISCLAIMER, DISCLAIMER_ON)
        else:
            store.delete_meta(target_id, META_DISCLAIMER)
        logger.info(
            "Saved canonical URL for item %s (disclaimer %s)",
            target_id,
            "on" if fields.disclaimer_enabled else "off",
        )

    def on_save_item(self, item_id: Any, submitted: Mapping[str, Any], context: RequestContext) -> None:
        """``save_item`` action."""
        self.save(item_id, submitted, context.store)
