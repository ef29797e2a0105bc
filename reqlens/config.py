"""
Defaults for ReqLens

Every value here can be overridden from the command line or through the
matching REQLENS_* environment variable.
"""

from pathlib import Path


# Geolocation provider
DEFAULT_API_URL = "http://ip-api.com/json/{address}"
DEFAULT_TIMEOUT = 5.0  # seconds

# Enrichment cache
DEFAULT_CACHE_PATH = Path.home() / '.reqlens' / 'cache.json'
DEFAULT_CACHE_TTL = 24 * 3600  # 1 day in seconds

# Fallback values for missing request fields
UNKNOWN = "Unknown"
UNKNOWN_USER_AGENT = "Unknown User Agent"

ENV_PREFIX = "REQLENS"
