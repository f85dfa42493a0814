from canonical_url.store import ContentStore


def test_find_item_by_url_matches_permalinks_and_queries(session):
    store = ContentStore(session, "http://testserver/")
    item = store.create_item(slug="hello", title="Hello")

    assert store.default_permalink(item) == "http://testserver/items/hello"
    assert store.find_item_by_url("http://testserver/items/hello") is item
    assert store.find_item_by_url("http://TESTSERVER/items/hello/") is item
    assert store.find_item_by_url("/items/hello") is item
    assert store.find_item_by_url(f"http://testserver/?item={item.id}") is item


def test_find_item_by_url_misses(session):
    store = ContentStore(session, "http://testserver")
    store.create_item(slug="hello")

    assert store.find_item_by_url("") is None
    assert store.find_item_by_url("https://elsewhere.com/items/hello") is None
    assert store.find_item_by_url("http://testserver/items/unknown") is None
    assert store.find_item_by_url("http://testserver/about") is None
    assert store.find_item_by_url("http://testserver/?item=abc") is None


def test_meta_helpers_ignore_missing_items(session):
    store = ContentStore(session, "http://testserver")

    assert store.get_meta(404, "canonical_url") == ""
    assert store.update_meta(404, "canonical_url", "https://example.com") is False
    assert store.delete_meta(404, "canonical_url") is False


def test_list_published_skips_drafts(session):
    store = ContentStore(session, "http://testserver")
    store.create_item(slug="live")
    store.create_item(slug="hidden", status="draft")

    assert [item.slug for item in store.list_published()] == ["live"]
