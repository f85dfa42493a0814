from bs4 import BeautifulSoup

from canonical_url.editor import MetadataEditor
from canonical_url.schemas import RequestContext
from canonical_url.store import ContentStore


def _store_with_item(session):
    store = ContentStore(session, "http://testserver")
    item = store.create_item(slug="hello", title="Hello", body="<p>Hi</p>")
    session.commit()
    return store, item


def _form_fields(html: str):
    soup = BeautifulSoup(html, "html.parser")
    url_input = soup.find("input", attrs={"name": "canonical_url"})
    checkbox = soup.find("input", attrs={"name": "disclaimer_enabled"})
    return url_input, checkbox


def test_save_then_render_round_trip(session):
    store, item = _store_with_item(session)
    editor = MetadataEditor()

    editor.save(item.id, {"canonical_url": "https://example.com/a"}, store)
    session.commit()

    url_input, checkbox = _form_fields(editor.render(store.get_item(item.id)))
    assert url_input["value"] == "https://example.com/a"
    assert checkbox["value"] == "true"
    assert not checkbox.has_attr("checked")


def test_render_checks_box_only_for_exact_true(session):
    store, item = _store_with_item(session)
    editor = MetadataEditor()

    store.update_meta(item.id, "disclaimer_enabled", "true")
    _, checkbox = _form_fields(editor.render(item))
    assert checkbox.has_attr("checked")

    store.update_meta(item.id, "disclaimer_enabled", "1")
    _, checkbox = _form_fields(editor.render(item))
    assert not checkbox.has_attr("checked")


def test_render_escapes_stored_url(session):
    store, item = _store_with_item(session)
    store.update_meta(item.id, "canonical_url", 'https://example.com/?a=1&b="2"')

    html = MetadataEditor().render(item)

    assert 'value="https://example.com/?a=1&amp;b=&#34;2&#34;"' in html


def test_unchecking_disclaimer_deletes_key(session):
    store, item = _store_with_item(session)
    editor = MetadataEditor()

    editor.save(item.id, {"canonical_url": "https://example.com/a", "disclaimer_enabled": "true"}, store)
    session.commit()
    assert store.get_meta(item.id, "disclaimer_enabled") == "true"

    editor.save(item.id, {"canonical_url": "https://example.com/a"}, store)
    session.commit()

    assert item.find_meta("disclaimer_enabled") is None
    assert store.get_meta(item.id, "canonical_url") == "https://example.com/a"


def test_any_non_empty_checkbox_value_stores_true(session):
    store, item = _store_with_item(session)

    MetadataEditor().save(item.id, {"canonical_url": "https://example.com/a", "disclaimer_enabled": "on"}, store)

    assert store.get_meta(item.id, "disclaimer_enabled") == "true"


def test_empty_url_never_alters_stored_value(session):
    store, item = _store_with_item(session)
    editor = MetadataEditor()
    editor.save(item.id, {"canonical_url": "https://example.com/a", "disclaimer_enabled": "true"}, store)
    session.commit()

    editor.save(item.id, {"canonical_url": ""}, store)
    editor.save(item.id, {"canonical_url": "   "}, store)
    editor.save(item.id, {}, store)
    session.commit()

    assert store.get_meta(item.id, "canonical_url") == "https://example.com/a"
    assert store.get_meta(item.id, "disclaimer_enabled") == "true"


def test_invalid_item_id_is_ignored(session):
    store, item = _store_with_item(session)
    editor = MetadataEditor()

    for bad_id in (None, 0, "", "abc", -4, 999):
        editor.save(bad_id, {"canonical_url": "https://example.com/a"}, store)

    assert store.get_meta(item.id, "canonical_url") == ""


def test_save_sanitizes_and_is_idempotent(session):
    store, item = _store_with_item(session)
    editor = MetadataEditor()
    fields = {"canonical_url": " example.com/my post ", "disclaimer_enabled": "true"}

    editor.save(str(item.id), fields, store)
    editor.save(str(item.id), fields, store)
    session.commit()

    assert store.get_meta(item.id, "canonical_url") == "http://example.com/my%20post"
    assert [row.meta_key for row in item.meta].count("canonical_url") == 1


def test_panel_appends_canonical_panel(session):
    store, item = _store_with_item(session)

    panels = MetadataEditor().panel([], item, RequestContext(store=store, is_admin=True))

    assert [panel.panel_id for panel in panels] == ["canonical-url-panel"]
    assert panels[0].title == "Canonical URL"
    assert 'name="canonical_url"' in panels[0].html
