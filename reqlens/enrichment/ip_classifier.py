"""
Network address classifier
"""

import ipaddress
from enum import Enum
from typing import Optional


class IPType(Enum):
    """Network address classification types"""
    PRIVATE = "private"
    CGNAT = "cgnat"
    LOOPBACK = "loopback"
    LINKLOCAL = "linklocal"
    MULTICAST = "multicast"
    RESERVED = "reserved"
    PUBLIC = "public"
    UNKNOWN = "unknown"


class IPClassifier:
    """
    Classify the client's network address for the collected record.

    Informational only: the geolocation lookup is attempted for every
    address, including ones classified here as non-public.

    Categories:
    - private: RFC1918 and IPv6 unique-local
    - cgnat: Carrier-grade NAT (100.64/10)
    - loopback: 127/8, ::1
    - linklocal: 169.254/16, fe80::/10
    - multicast: 224/4, ff00::/8
    - reserved: Other non-global ranges (documentation, benchmarking, ...)
    - public: Globally routable
    - unknown: Empty or not an IP address (e.g. a hostname)
    """

    CGNAT_NETWORK = ipaddress.IPv4Network('100.64.0.0/10')

    # RFC1918 and unique-local; other non-global ranges are reserved
    PRIVATE_NETWORKS = (
        ipaddress.IPv4Network('10.0.0.0/8'),
        ipaddress.IPv4Network('172.16.0.0/12'),
        ipaddress.IPv4Network('192.168.0.0/16'),
        ipaddress.IPv6Network('fc00::/7'),
    )

    @classmethod
    def classify(cls, address: Optional[str]) -> IPType:
        """
        Classify a network address.

        Args:
            address: IPv4 or IPv6 address string

        Returns:
            IPType enum value
        """
        if not address:
            return IPType.UNKNOWN

        try:
            addr = ipaddress.ip_address(address.strip())
        except ValueError:
            return IPType.UNKNOWN

        if addr.is_loopback:
            return IPType.LOOPBACK

        if addr.is_link_local:
            return IPType.LINKLOCAL

        if addr.is_multicast:
            return IPType.MULTICAST

        # CGNAT range is neither private nor global
        if addr.version == 4 and addr in cls.CGNAT_NETWORK:
            return IPType.CGNAT

        if addr.is_reserved:
            return IPType.RESERVED

        if any(addr.version == net.version and addr in net for net in cls.PRIVATE_NETWORKS):
            return IPType.PRIVATE

        if addr.is_global:
            return IPType.PUBLIC

        # Documentation, benchmarking and other special-purpose ranges
        return IPType.RESERVED

    @classmethod
    def is_public(cls, address: Optional[str]) -> bool:
        """Check if address is publicly routable"""
        return cls.classify(address) == IPType.PUBLIC
