"""
JSON export for ReqLens
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..models import CollectedInfo
from .. import __version__


class JsonExporter:
    """
    Export collected request information to JSON format.

    Output format is designed to be both human-readable
    and machine-parseable.
    """

    def __init__(self):
        self.data_sources = []

    def add_data_source(self, source: str):
        """Record data source used"""
        if source not in self.data_sources:
            self.data_sources.append(source)

    def export(self, info: CollectedInfo,
               output_path: Optional[Path] = None) -> dict:
        """
        Export collected info to JSON.

        Args:
            info: Collected request information
            output_path: Optional file path to write

        Returns:
            JSON-serializable dict
        """
        data = {
            "meta": {
                "version": __version__,
                "generator": "ReqLens",
                "data_sources": self.data_sources,
                "generated_at": datetime.now().isoformat()
            },
            **info.to_dict()
        }

        if output_path:
            self._write_file(data, output_path)

        return data

    def _write_file(self, data: dict, path: Path):
        """Write JSON to file"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)


def export_json(info: CollectedInfo, output_path: Optional[Path] = None) -> dict:
    """Convenience function for JSON export"""
    exporter = JsonExporter()
    return exporter.export(info, output_path)
