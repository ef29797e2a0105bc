"""Shared pytest fixtures for ReqLens tests."""

import pytest
import structlog

from reqlens.cache import Cache
from reqlens.enrichment import GeoLookup
from reqlens.models import RequestEnvelope


CHROME_WINDOWS_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

FIREFOX_LINUX_UA = (
    "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
)

SUCCESS_PAYLOAD = {
    "status": "success",
    "country": "Wonderland",
    "countryCode": "WL",
    "regionName": "Queen's Court",
    "city": "Tea Party",
    "lat": 51.5,
    "lon": -0.12,
    "timezone": "Europe/London",
    "isp": "Rabbit Hole Networks",
    "query": "203.0.113.7",
}


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any logging configuration a test (e.g. the CLI) applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def geo_lookup():
    """GeoLookup against the default ip-api.com endpoint."""
    lookup = GeoLookup(timeout=1.0)
    yield lookup
    lookup.close()


@pytest.fixture
def cache(tmp_path) -> Cache:
    """Cache backed by a temporary file."""
    return Cache(path=tmp_path / "cache.json")


@pytest.fixture
def envelope() -> RequestEnvelope:
    """A typical proxied HTTPS request."""
    return RequestEnvelope(
        user_agent=FIREFOX_LINUX_UA,
        forwarded_for="203.0.113.7, 10.0.0.1",
        remote_addr="10.0.0.1",
        referer="https://example.org/",
        method="GET",
        request_time=1700000000,
        accept_language="en-GB,en;q=0.9",
        uri="/landing?ref=mail",
        host="app.example.org",
        https=True,
    )
