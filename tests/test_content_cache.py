from launchloom.services.content_cache import ContentCache


def test_key_normalizes_case_and_whitespace():
    a = ContentCache.key_for("Acme  Analytics", " SaaS founders", "pro")
    b = ContentCache.key_for("acme analytics", "saas   founders ", "PRO")
    assert a == b
    assert a != ContentCache.key_for("acme analytics", "saas founders", "standard")


def test_get_and_set():
    cache = ContentCache(ttl_seconds=60)
    cache.set("k", '{"a": "b"}')
    assert cache.get("k") == '{"a": "b"}'
    assert cache.get("missing") is None
    assert len(cache) == 1


def test_expired_entries_are_evicted(monkeypatch):
    cache = ContentCache(ttl_seconds=10)
    now = [1000.0]
    monkeypatch.setattr(cache, "_now", lambda: now[0])
    cache.set("k", "content")
    now[0] += 9
    assert cache.get("k") == "content"
    now[0] += 2
    assert cache.get("k") is None
    assert len(cache) == 0


def test_ttl_from_env(monkeypatch):
    monkeypatch.setenv("CONTENT_CACHE_TTL_SECONDS", "5")
    assert ContentCache().ttl_seconds == 5.0


def test_set_sweeps_expired_entries_under_other_keys(monkeypatch):
    cache = ContentCache(ttl_seconds=10)
    now = [1000.0]
    monkeypatch.setattr(cache, "_now", lambda: now[0])
    cache.set("a", "first")
    cache.set("b", "second")
    now[0] += 11
    cache.set("c", "third")
    assert len(cache) == 1
    assert cache.get("c") == "third"
