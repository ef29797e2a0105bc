"""
Geographic IP lookup via ip-api.com
"""

import json
from typing import Any, Optional

import httpx
import structlog

from ..config import DEFAULT_API_URL, DEFAULT_TIMEOUT
from ..errors import EnrichmentError, ParseError, ProviderError, TransportError
from ..result import Failure, Result, Success


logger = structlog.get_logger(__name__)

GeoResult = Result[dict[str, Any], EnrichmentError]


# Country code to flag emoji mapping
COUNTRY_FLAGS = {
    'CN': '🇨🇳', 'US': '🇺🇸', 'JP': '🇯🇵', 'KR': '🇰🇷', 'HK': '🇭🇰',
    'TW': '🇹🇼', 'SG': '🇸🇬', 'DE': '🇩🇪', 'GB': '🇬🇧', 'FR': '🇫🇷',
    'NL': '🇳🇱', 'RU': '🇷🇺', 'AU': '🇦🇺', 'CA': '🇨🇦', 'IN': '🇮🇳',
    'BR': '🇧🇷', 'IT': '🇮🇹', 'ES': '🇪🇸', 'SE': '🇸🇪', 'NO': '🇳🇴',
    'FI': '🇫🇮', 'DK': '🇩🇰', 'PL': '🇵🇱', 'CZ': '🇨🇿', 'AT': '🇦🇹',
    'CH': '🇨🇭', 'BE': '🇧🇪', 'IE': '🇮🇪', 'NZ': '🇳🇿', 'MX': '🇲🇽',
    'AR': '🇦🇷', 'CL': '🇨🇱', 'CO': '🇨🇴', 'ZA': '🇿🇦', 'EG': '🇪🇬',
    'AE': '🇦🇪', 'IL': '🇮🇱', 'TR': '🇹🇷', 'TH': '🇹🇭', 'VN': '🇻🇳',
    'ID': '🇮🇩', 'MY': '🇲🇾', 'PH': '🇵🇭', 'UA': '🇺🇦', 'RO': '🇷🇴',
    'GR': '🇬🇷', 'PT': '🇵🇹', 'HU': '🇭🇺', 'BG': '🇧🇬', 'SK': '🇸🇰',
}


def get_flag(country_code: Optional[str]) -> str:
    """Get flag emoji for country code"""
    if not country_code:
        return ''
    return COUNTRY_FLAGS.get(country_code.upper(), '🌍')


class GeoLookup:
    """
    Geographic IP lookup via ip-api.com.

    Free tier: 45 requests/minute, no API key required.

    Failures are returned, never raised:
    - TransportError: endpoint unreachable, timed out, or URL unusable
    - ParseError: body is not a JSON object
    - ProviderError: HTTP error status, or a "status" other than "success"
    """

    API_URL = DEFAULT_API_URL
    SUCCESS_STATUS = "success"

    def __init__(self, api_url: Optional[str] = None,
                 timeout: float = DEFAULT_TIMEOUT,
                 fields: Optional[str] = None,
                 client: Optional[httpx.Client] = None):
        self.api_url = api_url or self.API_URL
        self.timeout = timeout
        self.fields = fields
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
        return self._client

    def build_url(self, address: str) -> str:
        """Substitute the address verbatim into the endpoint template"""
        url = self.api_url.replace('{address}', address)
        if self.fields:
            url = f"{url}?fields={self.fields}"
        return url

    def lookup(self, address: str) -> GeoResult:
        """
        Lookup geo info for a single address.

        Args:
            address: Network address, passed to the provider unvalidated

        Returns:
            Success with the full decoded payload, or Failure with a
            TransportError, ParseError or ProviderError
        """
        log = logger.bind(address=address)
        url = self.build_url(address)

        try:
            response = self._get_client().get(url)
        except httpx.TimeoutException as e:
            log.warning("geo_lookup_timeout", timeout=self.timeout, error=str(e))
            return Failure(error=TransportError(
                message=f"Geolocation request timed out after {self.timeout}s"
            ))
        except httpx.RequestError as e:
            log.warning("geo_lookup_transport_error", error=str(e))
            return Failure(error=TransportError(
                message=f"Unable to fetch IP information: {e}"
            ))
        except (httpx.InvalidURL, UnicodeError) as e:
            # e.g. lone surrogates from a surrogateescape-decoded environ
            log.warning("geo_lookup_invalid_url", url=ascii(url), error=str(e))
            return Failure(error=TransportError(
                message=f"Invalid lookup URL: {e}"
            ))

        if not response.is_success:
            log.warning("geo_lookup_http_error", status_code=response.status_code)
            return Failure(error=ProviderError(
                message=f"Provider returned HTTP {response.status_code}",
                status=f"http_{response.status_code}"
            ))

        return self._parse_response(response, log)

    def _parse_response(self, response: httpx.Response, log) -> GeoResult:
        """Decode and validate the provider payload"""
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            log.warning("geo_lookup_invalid_json", error=str(e))
            return Failure(error=ParseError(
                message=f"Invalid JSON in provider response: {e}"
            ))

        if not isinstance(data, dict):
            log.warning("geo_lookup_unexpected_shape", type=type(data).__name__)
            return Failure(error=ParseError(
                message=f"Expected a JSON object, got {type(data).__name__}"
            ))

        status = data.get('status')
        if status != self.SUCCESS_STATUS:
            message = data.get('message') or "Failed to retrieve IP information"
            log.warning("geo_lookup_failed", status=status, provider_message=message)
            return Failure(error=ProviderError(
                message=str(message),
                status=None if status is None else str(status)
            ))

        log.debug("geo_lookup_success", country=data.get('country'))
        return Success(value=data)

    def close(self):
        """Close HTTP client if we created it"""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
