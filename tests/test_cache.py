"""Unit tests for the geolocation payload cache."""

import json
import time

import pytest

from reqlens.cache import Cache
from tests.conftest import SUCCESS_PAYLOAD


class TestCache:

    def test_set_and_get(self, cache: Cache):
        cache.set("203.0.113.7", SUCCESS_PAYLOAD)

        assert cache.has("203.0.113.7")
        assert cache.get("203.0.113.7") == SUCCESS_PAYLOAD
        assert cache.get("198.51.100.1") is None

    def test_get_returns_copy(self, cache: Cache):
        cache.set("203.0.113.7", dict(SUCCESS_PAYLOAD))

        cache.get("203.0.113.7")["country"] = "Elsewhere"

        assert cache.get("203.0.113.7")["country"] == "Wonderland"

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "nested" / "cache.json"
        with Cache(path=path) as cache:
            cache.set("203.0.113.7", SUCCESS_PAYLOAD)

        assert path.exists()
        assert Cache(path=path).get("203.0.113.7") == SUCCESS_PAYLOAD

    def test_expired_entries_dropped(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text(json.dumps({
            "203.0.113.7": {"_ts": time.time() - 100, "payload": SUCCESS_PAYLOAD}
        }))

        assert Cache(path=path, ttl=10).get("203.0.113.7") is None
        assert Cache(path=path, ttl=1000).get("203.0.113.7") == SUCCESS_PAYLOAD

    def test_zero_ttl_never_hits(self, tmp_path):
        cache = Cache(path=tmp_path / "cache.json", ttl=0)
        cache.set("203.0.113.7", SUCCESS_PAYLOAD)

        assert cache.get("203.0.113.7") is None

    def test_corrupt_file_ignored(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text("{not json")

        assert Cache(path=path).get("203.0.113.7") is None

    def test_malformed_entries_ignored(self, tmp_path):
        path = tmp_path / "cache.json"
        path.write_text(json.dumps({"a": [], "b": {"_ts": time.time()}}))

        cache = Cache(path=path)

        assert cache.get("a") is None
        assert cache.get("b") is None

    @pytest.mark.parametrize("ts", ["yesterday", None, [1], True])
    def test_non_numeric_timestamp_ignored(self, tmp_path, ts):
        path = tmp_path / "cache.json"
        path.write_text(json.dumps({
            "203.0.113.7": {"_ts": ts, "payload": SUCCESS_PAYLOAD},
            "198.51.100.1": {"_ts": time.time(), "payload": SUCCESS_PAYLOAD},
        }))

        cache = Cache(path=path)

        assert cache.get("203.0.113.7") is None
        assert cache.get("198.51.100.1") == SUCCESS_PAYLOAD

    def test_clear(self, cache: Cache):
        cache.set("203.0.113.7", SUCCESS_PAYLOAD)
        cache.clear()

        assert not cache.has("203.0.113.7")
        assert json.loads(cache.path.read_text()) == {}
