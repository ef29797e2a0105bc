"""
Data models for ReqLens
"""

import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .config import UNKNOWN
from .errors import EnrichmentError


@dataclass(frozen=True)
class RequestEnvelope:
    """
    Raw request fields, passed explicitly into the collector.

    Every field is optional; the collector substitutes defaults for
    missing values.
    """
    user_agent: Optional[str] = None
    client_ip: Optional[str] = None       # Client-IP header
    forwarded_for: Optional[str] = None   # X-Forwarded-For header
    remote_addr: Optional[str] = None
    referer: Optional[str] = None
    method: Optional[str] = None
    request_time: Optional[int] = None
    accept_language: Optional[str] = None
    uri: Optional[str] = None
    host: Optional[str] = None
    https: bool = False
    screen_width: Optional[str] = None
    screen_height: Optional[str] = None

    @classmethod
    def from_environ(cls, environ: Mapping[str, str], **overrides) -> 'RequestEnvelope':
        """
        Build an envelope from a CGI/WSGI environment mapping.

        Args:
            environ: e.g. os.environ under CGI, or a WSGI environ dict
            **overrides: Field values taking precedence over the environment
        """
        uri = environ.get('REQUEST_URI')
        if uri is None and 'PATH_INFO' in environ:
            uri = environ.get('SCRIPT_NAME', '') + environ['PATH_INFO']
            if environ.get('QUERY_STRING'):
                uri += '?' + environ['QUERY_STRING']

        values = dict(
            user_agent=environ.get('HTTP_USER_AGENT'),
            client_ip=environ.get('HTTP_CLIENT_IP'),
            forwarded_for=environ.get('HTTP_X_FORWARDED_FOR'),
            remote_addr=environ.get('REMOTE_ADDR'),
            referer=environ.get('HTTP_REFERER'),
            method=environ.get('REQUEST_METHOD'),
            request_time=_parse_time(environ.get('REQUEST_TIME')),
            accept_language=environ.get('HTTP_ACCEPT_LANGUAGE'),
            uri=uri,
            host=environ.get('HTTP_HOST'),
            https=_is_on(environ.get('HTTPS')) or environ.get('wsgi.url_scheme') == 'https',
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str],
                     remote_addr: Optional[str] = None, **fields) -> 'RequestEnvelope':
        """Build an envelope from an HTTP header mapping (any key case)"""
        lowered = {k.lower(): v for k, v in headers.items()}
        return cls(
            user_agent=lowered.get('user-agent'),
            client_ip=lowered.get('client-ip'),
            forwarded_for=lowered.get('x-forwarded-for'),
            referer=lowered.get('referer'),
            accept_language=lowered.get('accept-language'),
            host=lowered.get('host'),
            remote_addr=remote_addr,
            **fields
        )


def _is_on(value: Optional[str]) -> bool:
    return value is not None and value.lower() == 'on'


def _parse_time(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return int(float(value))
    except ValueError:
        return None


@dataclass(frozen=True)
class ScreenSize:
    """Screen size as reported by the frontend"""
    width: str = UNKNOWN
    height: str = UNKNOWN

    def to_dict(self) -> dict:
        return {'width': self.width, 'height': self.height}


@dataclass
class CollectedInfo:
    """Everything collected about one request"""
    ip: Optional[str]
    user_agent: str
    operating_system: str
    browser: str
    protocol: str
    request_time: int = field(default_factory=lambda: int(time.time()))
    ip_type: Optional[str] = None
    referer: Optional[str] = None
    request_method: Optional[str] = None
    browser_language: str = UNKNOWN
    request_uri: Optional[str] = None
    host: Optional[str] = None
    screen_size: ScreenSize = field(default_factory=ScreenSize)
    ip_info: Optional[dict[str, Any]] = None
    ip_info_error: Optional[EnrichmentError] = None

    @property
    def enriched(self) -> bool:
        return self.ip_info is not None

    def to_dict(self) -> dict:
        """Serialize with the record's public key names"""
        return {
            'ip': self.ip,
            'ip_type': self.ip_type,
            'user_agent': self.user_agent,
            'referer': self.referer,
            'request_method': self.request_method,
            'request_time': self.request_time,
            'browser_language': self.browser_language,
            'request_uri': self.request_uri,
            'host': self.host,
            'protocol': self.protocol,
            'operating_system': self.operating_system,
            'browser': self.browser,
            'screen_size': self.screen_size.to_dict(),
            'ip_info': self.ip_info,
            'ip_info_error': self.ip_info_error.to_dict() if self.ip_info_error else None,
        }
