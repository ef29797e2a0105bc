"""
Request metadata collector

Gathers request envelope fields, classifies the User-Agent and enriches
the client address with geolocation data.
"""

import time
from typing import Optional

import structlog

from .cache import Cache
from .classifier import get_browser, get_operating_system
from .config import UNKNOWN, UNKNOWN_USER_AGENT
from .enrichment import GeoLookup, IPClassifier
from .errors import EnrichmentFailed
from .models import CollectedInfo, RequestEnvelope, ScreenSize
from .result import Failure


logger = structlog.get_logger(__name__)


def get_user_ip(envelope: RequestEnvelope) -> Optional[str]:
    """
    Resolve the client address.

    Precedence: Client-IP header, then the first X-Forwarded-For entry,
    then the socket's remote address.
    """
    client_ip = (envelope.client_ip or '').strip()
    if client_ip:
        return client_ip

    if envelope.forwarded_for:
        # Format: "client, proxy1, proxy2"
        first = envelope.forwarded_for.split(',')[0].strip()
        if first:
            return first

    return envelope.remote_addr


def get_protocol(envelope: RequestEnvelope) -> str:
    return 'HTTPS' if envelope.https else 'HTTP'


class Collector:
    """
    Collects one CollectedInfo record per request envelope.

    Enrichment failure policy:
    - default: the record is still produced, with ip_info set to None
      and the failure kept in ip_info_error
    - strict: EnrichmentFailed is raised and no record is produced
    """

    def __init__(self, geo_lookup: Optional[GeoLookup] = None,
                 cache: Optional[Cache] = None,
                 enable_geo: bool = True,
                 strict: bool = False):
        self.geo_lookup = geo_lookup
        self._owns_lookup = geo_lookup is None
        self.cache = cache
        self.enable_geo = enable_geo
        self.strict = strict

    def collect(self, envelope: RequestEnvelope) -> CollectedInfo:
        """
        Collect all information for a request.

        Raises:
            EnrichmentFailed: In strict mode, when the geolocation lookup fails
        """
        ip = get_user_ip(envelope)
        user_agent = envelope.user_agent or UNKNOWN_USER_AGENT

        info = CollectedInfo(
            ip=ip,
            ip_type=IPClassifier.classify(ip).value,
            user_agent=user_agent,
            operating_system=get_operating_system(user_agent),
            browser=get_browser(user_agent),
            protocol=get_protocol(envelope),
            request_time=envelope.request_time if envelope.request_time is not None
            else int(time.time()),
            referer=envelope.referer,
            request_method=envelope.method,
            browser_language=envelope.accept_language or UNKNOWN,
            request_uri=envelope.uri,
            host=envelope.host,
            screen_size=ScreenSize(
                width=envelope.screen_width or UNKNOWN,
                height=envelope.screen_height or UNKNOWN
            ),
        )

        if self.enable_geo:
            self._enrich(info)

        return info

    def _enrich(self, info: CollectedInfo):
        """Attach geolocation payload or failure to the record"""
        address = info.ip or ''

        if self.cache is not None:
            cached = self.cache.get(address)
            if cached is not None:
                logger.debug("enrichment_cache_hit", address=address)
                info.ip_info = cached
                return

        if self.geo_lookup is None:
            self.geo_lookup = GeoLookup()
            self._owns_lookup = True

        result = self.geo_lookup.lookup(address)

        if isinstance(result, Failure):
            if self.strict:
                raise EnrichmentFailed(result.error)
            logger.warning(
                "enrichment_omitted",
                address=address,
                kind=result.error.kind,
                reason=result.error.message
            )
            info.ip_info_error = result.error
            return

        info.ip_info = result.value
        if self.cache is not None:
            self.cache.set(address, result.value)

    def close(self):
        """Close the geolocation client if we created it"""
        if self.geo_lookup is not None and self._owns_lookup:
            self.geo_lookup.close()
            self.geo_lookup = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def collect(envelope: RequestEnvelope, **options) -> CollectedInfo:
    """Convenience function for a one-shot collection"""
    with Collector(**options) as collector:
        return collector.collect(envelope)
