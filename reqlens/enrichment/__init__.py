"""
Enrichment modules for ReqLens
"""

from .ip_classifier import IPClassifier, IPType
from .geo_lookup import GeoLookup, get_flag

__all__ = ['IPClassifier', 'IPType', 'GeoLookup', 'get_flag']
