"""
Enrichment error taxonomy
"""

from dataclasses import dataclass
from typing import ClassVar, Optional


@dataclass(frozen=True)
class EnrichmentError:
    """Base for all enrichment failures"""
    message: str

    kind: ClassVar[str] = "error"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


@dataclass(frozen=True)
class TransportError(EnrichmentError):
    """Endpoint could not be reached or did not respond"""
    kind: ClassVar[str] = "transport"


@dataclass(frozen=True)
class ParseError(EnrichmentError):
    """Response body was not a JSON object"""
    kind: ClassVar[str] = "parse"


@dataclass(frozen=True)
class ProviderError(EnrichmentError):
    """Response was well-formed but reported a non-success status"""
    status: Optional[str] = None
    kind: ClassVar[str] = "provider"

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["status"] = self.status
        return data


class EnrichmentFailed(Exception):
    """Raised by the collector in strict mode when a lookup fails"""

    def __init__(self, error: EnrichmentError):
        super().__init__(error.message)
        self.error = error
