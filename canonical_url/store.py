"""Request-scoped access to content items and their metadata."""
from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import STATUS_PUBLISH, ContentItem, ItemMeta

logger = logging.getLogger(__name__)

PERMALINK_PREFIX = "/items/"
_PERMALINK_PATH = re.compile(r"^/items/(?P<slug>[^/]+)/?$")


class ContentStore:
    """Reads and writes content items through one SQLAlchemy session."""

    def __init__(self, session: Session, base_url: str) -> None:
        self.session = session
        self.base_url = base_url.rstrip("/")

    def get_item(self, item_id: int) -> Optional[ContentItem]:
        return self.session.get(ContentItem, item_id)

    def get_item_by_slug(self, slug: str) -> Optional[ContentItem]:
        return self.session.execute(
            select(ContentItem).where(ContentItem.slug == slug)
        ).scalar_one_or_none()

    def list_published(self) -> list[ContentItem]:
        return list(
            self.session.execute(
                select(ContentItem)
                .where(ContentItem.status == STATUS_PUBLISH)
                .order_by(ContentItem.id.desc())
            )
            .scalars()
            .all()
        )

    def create_item(self, slug: str, title: str = "", body: str = "", status: str = STATUS_PUBLISH) -> ContentItem:
        item = ContentItem(slug=slug, title=title, body=body, status=status)
        self.session.add(item)
        self.session.flush()
        logger.info("Created content item %s (%s)", item.id, slug)
        return item

    def get_meta(self, item_id: int, key: str) -> str:
        item = self.get_item(item_id)
        if item is None:
            return ""
        return item.get_meta(key)

    def update_meta(self, item_id: int, key: str, value: str) -> bool:
        item = self.get_item(item_id)
        if item is None:
            return False
        row = item.find_meta(key)
        if row is None:
            item.meta.append(ItemMeta(meta_key=key, meta_value=value))
        else:
            row.meta_value = value
        self.session.flush()
        return True

    def delete_meta(self, item_id: int, key: str) -> bool:
        item = self.get_item(item_id)
        if item is None:
            return False
        row = item.find_meta(key)
        if row is None:
            return False
        item.meta.remove(row)
        self.session.flush()
        return True

    def default_permalink(self, item: ContentItem) -> str:
        return f"{self.base_url}{PERMALINK_PREFIX}{item.slug}"

    def find_item_by_url(self, url: str) -> Optional[ContentItem]:
        """Map a site URL back to the item it points at.

        Understands ``/items/<slug>`` paths and ``?item=<id>`` queries. URLs
        on another host, or pointing at nothing, give ``None``.
        """

        if not url:
            return None
        parts = urlsplit(url)
        site = urlsplit(self.base_url)
        if parts.netloc and parts.netloc.lower() != site.netloc.lower():
            return None

        path = parts.path
        site_path = site.path.rstrip("/")
        if site_path and path.startswith(site_path):
            path = path[len(site_path):]

        match = _PERMALINK_PATH.match(path)
        if match:
            return self.get_item_by_slug(match.group("slug"))

        item_ids = parse_qs(parts.query).get("item")
        if item_ids and item_ids[0].isdigit():
            return self.get_item(int(item_ids[0]))
        return None
