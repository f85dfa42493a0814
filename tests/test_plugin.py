from types import SimpleNamespace

from canonical_url import hooks as hook_names
from canonical_url.hooks import HookRegistry
from canonical_url.models import ContentItem, ItemMeta
from canonical_url.plugin import ADMIN_HOOKS, PUBLIC_HOOKS, CanonicalUrlPlugin
from canonical_url.resolver import CanonicalResolver
from canonical_url.schemas import RequestContext


def test_admin_and_public_hooks_stay_separate():
    admin, public = HookRegistry("admin"), HookRegistry("public")
    plugin = CanonicalUrlPlugin(resolver=CanonicalResolver(public))

    plugin.register_admin(admin)
    plugin.register_public(public)

    for spec in ADMIN_HOOKS:
        assert admin.has_hook(spec.hook_name)
        assert not public.has_hook(spec.hook_name)
    for spec in PUBLIC_HOOKS:
        assert public.has_hook(spec.hook_name)
        assert not admin.has_hook(spec.hook_name)


def test_public_hooks_resolve_through_registry():
    public = HookRegistry("public")
    CanonicalUrlPlugin(resolver=CanonicalResolver(public)).register_public(public)
    item = ContentItem(
        id=3,
        slug="a",
        body="",
        meta=[ItemMeta(meta_key="canonical_url", meta_value="https://ex.com/a")],
    )
    context = RequestContext(store=SimpleNamespace(find_item_by_url=lambda url: item), is_single=True)

    assert public.apply_filters(hook_names.GET_CANONICAL_URL, "http://site/a", item, context) == "https://ex.com/a"
    assert public.apply_filters(hook_names.ITEM_LINK, "http://site/a", item, context) == "https://ex.com/a"
    assert public.apply_filters(hook_names.SEO_CANONICAL, "http://site/a", context) == "https://ex.com/a"
    assert public.apply_filters(hook_names.THE_CONTENT, "body", item, context) == "body"


def test_save_action_writes_through_context_store():
    admin = HookRegistry("admin")
    CanonicalUrlPlugin().register_admin(admin)
    writes = []
    store = SimpleNamespace(
        update_meta=lambda item_id, key, value: writes.append((item_id, key, value)) or True,
        delete_meta=lambda item_id, key: writes.append((item_id, key, None)) or True,
    )

    admin.do_action(
        hook_names.SAVE_ITEM,
        5,
        {"canonical_url": "https://ex.com/a", "disclaimer_enabled": "true"},
        RequestContext(store=store, is_admin=True),
    )

    assert writes == [(5, "canonical_url", "https://ex.com/a"), (5, "disclaimer_enabled", "true")]
