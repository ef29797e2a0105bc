"""
ReqLens - Request Metadata Collector

Collects network origin, client software and request envelope fields
for a single web request, with optional geolocation enrichment.
"""

__version__ = "1.0.0"
__author__ = "ReqLens"
