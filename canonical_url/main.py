"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
import os
import re
import time

from fastapi import Depends, FastAPI, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from . import hooks as hook_names
from .db import get_session, init_db
from .hooks import HookRegistry
from .logging_setup import configure_logging
from .models import STATUS_DRAFT, STATUS_PUBLISH, ContentItem
from .plugin import CanonicalUrlPlugin
from .resolver import CanonicalResolver
from .schemas import RequestContext
from .seo import build_head_tags
from .store import ContentStore
from .templating import TEMPLATES

LOG_FILE_PATH = configure_logging(os.getenv("LOG_LEVEL"))
logger = logging.getLogger(__name__)

BASE_URL = os.getenv("BASE_URL", "http://localhost:8000").rstrip("/")
SITE_NAME = os.getenv("SITE_NAME", "Canonical URL demo")
CANONICAL_DISCLAIMER = os.getenv("CANONICAL_DISCLAIMER", "on").strip().lower()
SEO_LAYER = os.getenv("SEO_LAYER", "on").strip().lower()

_SWITCH_OFF = {"0", "off", "false", "no"}
_SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*$")

ADMIN_HOOKS = HookRegistry("admin")
PUBLIC_HOOKS = HookRegistry("public")

app = FastAPI(title=SITE_NAME)


def _disclaimer_switched_off(enabled: bool, context: RequestContext) -> bool:
    return False


def register_hooks() -> None:
    """Fill the admin and public registries. Safe to call more than once."""
    if ADMIN_HOOKS.has_hook(hook_names.SAVE_ITEM):
        return
    plugin = CanonicalUrlPlugin(resolver=CanonicalResolver(PUBLIC_HOOKS))
    plugin.register_admin(ADMIN_HOOKS)
    plugin.register_public(PUBLIC_HOOKS)
    if CANONICAL_DISCLAIMER in _SWITCH_OFF:
        PUBLIC_HOOKS.add_filter(hook_names.ENABLE_CANONICAL_DISCLAIMER, _disclaimer_switched_off, priority=99)
        logger.info("Canonical disclaimer disabled by configuration")


@app.on_event("startup")
def on_startup() -> None:
    start = time.perf_counter()
    logger.info("Starting %s (logs at %s)", SITE_NAME, LOG_FILE_PATH)
    init_db()
    register_hooks()
    logger.info("Initialised in %.2fs", time.perf_counter() - start)


def get_store(session: Session = Depends(get_session)) -> ContentStore:
    return ContentStore(session, BASE_URL)


def _get_item_or_404(store: ContentStore, item_id: int) -> ContentItem:
    item = store.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Content item not found")
    return item


@app.get("/", response_class=HTMLResponse)
def archive(request: Request, store: ContentStore = Depends(get_store)) -> HTMLResponse:
    context = RequestContext(store=store, is_single=False)
    entries = []
    for item in store.list_published():
        entries.append(
            {
                "title": item.title,
                "permalink": PUBLIC_HOOKS.apply_filters(
                    hook_names.ITEM_LINK, store.default_permalink(item), item, context
                ),
                "body": PUBLIC_HOOKS.apply_filters(hook_names.THE_CONTENT, item.body, item, context),
            }
        )
    return TEMPLATES.TemplateResponse(
        request,
        "archive.html",
        {"site_name": SITE_NAME, "entries": entries, "canonical": f"{BASE_URL}/"},
    )


@app.get("/items/{slug}", response_class=HTMLResponse)
def single_item(slug: str, request: Request, store: ContentStore = Depends(get_store)) -> HTMLResponse:
    item = store.get_item_by_slug(slug)
    if item is None or item.status != STATUS_PUBLISH:
        raise HTTPException(status_code=404, detail="Content item not found")

    context = RequestContext(store=store, is_single=True)
    page_url = store.default_permalink(item)
    canonical = PUBLIC_HOOKS.apply_filters(hook_names.GET_CANONICAL_URL, page_url, item, context)
    seo = build_head_tags(page_url, PUBLIC_HOOKS, context) if SEO_LAYER not in _SWITCH_OFF else None
    body = PUBLIC_HOOKS.apply_filters(hook_names.THE_CONTENT, item.body, item, context)
    return TEMPLATES.TemplateResponse(
        request,
        "single.html",
        {
            "site_name": SITE_NAME,
            "title": item.title,
            "canonical": canonical,
            "seo": seo,
            "body": body,
        },
    )


def _render_edit_screen(request: Request, store: ContentStore, item: ContentItem | None) -> HTMLResponse:
    # New items get the panels too, rendered against an unsaved item.
    panel_item = item if item is not None else ContentItem(slug="", title="", body="")
    context = RequestContext(store=store, is_admin=True)
    panels = ADMIN_HOOKS.apply_filters(hook_names.EDIT_FORM_PANELS, [], panel_item, context)
    return TEMPLATES.TemplateResponse(
        request,
        "edit.html",
        {"site_name": SITE_NAME, "item": item, "panels": panels},
    )


@app.get("/admin/items/new", response_class=HTMLResponse)
def new_item(request: Request, store: ContentStore = Depends(get_store)) -> HTMLResponse:
    return _render_edit_screen(request, store, None)


@app.post("/admin/items")
async def create_item(
    request: Request,
    slug: str = Form(...),
    title: str = Form(""),
    body: str = Form(""),
    item_status: str = Form(STATUS_PUBLISH),
    store: ContentStore = Depends(get_store),
) -> RedirectResponse:
    slug = slug.strip().lower()
    if not _SLUG_PATTERN.match(slug):
        raise HTTPException(status_code=400, detail="Slug must be lowercase letters, digits and dashes")
    if store.get_item_by_slug(slug) is not None:
        raise HTTPException(status_code=400, detail="Slug already in use")

    item = store.create_item(
        slug=slug,
        title=title,
        body=body,
        status=STATUS_DRAFT if item_status == STATUS_DRAFT else STATUS_PUBLISH,
    )
    form = await request.form()
    context = RequestContext(store=store, is_admin=True)
    ADMIN_HOOKS.do_action(hook_names.SAVE_ITEM, item.id, dict(form), context)
    store.session.commit()
    return RedirectResponse(url=f"/admin/items/{item.id}", status_code=status.HTTP_303_SEE_OTHER)


@app.get("/admin/items/{item_id}", response_class=HTMLResponse)
def edit_item(item_id: int, request: Request, store: ContentStore = Depends(get_store)) -> HTMLResponse:
    item = _get_item_or_404(store, item_id)
    return _render_edit_screen(request, store, item)


@app.post("/admin/items/{item_id}")
async def update_item(
    item_id: int,
    request: Request,
    title: str = Form(""),
    body: str = Form(""),
    item_status: str = Form(STATUS_PUBLISH),
    store: ContentStore = Depends(get_store),
) -> RedirectResponse:
    item = _get_item_or_404(store, item_id)
    item.title = title
    item.body = body
    item.status = STATUS_DRAFT if item_status == STATUS_DRAFT else STATUS_PUBLISH
    store.session.flush()
    logger.info("Updated content item %s", item.id)

    form = await request.form()
    context = RequestContext(store=store, is_admin=True)
    ADMIN_HOOKS.do_action(hook_names.SAVE_ITEM, item.id, dict(form), context)
    store.session.commit()
    return RedirectResponse(url=f"/admin/items/{item.id}", status_code=status.HTTP_303_SEE_OTHER)
