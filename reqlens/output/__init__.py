"""
Output modules for ReqLens
"""

from .console import ConsoleOutput
from .json_export import JsonExporter

__all__ = ['ConsoleOutput', 'JsonExporter']
