"""
Export functionality for program lists.

Supports CSV and JSON output files.
"""

import os
import csv
import json
from typing import List, Optional
from datetime import datetime
import logging

from core.program import ProgramInfo
from utils.system_info import get_system_info

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    ("Name", "name"),
    ("Version", "version"),
    ("Publisher", "publisher"),
    ("Install Date", "install_date"),
    ("Size (KB)", "size"),
    ("Install Location", "install_location"),
    ("Uninstall String", "uninstall_string"),
    ("Location", "location"),
    ("Registry Key", "registry_key"),
]


class Exporter:
    """Exporter for program lists."""

    def __init__(self, output_dir: Optional[str] = None):
        """Initialize exporter.

        Args:
            output_dir: Output directory for exports. If None, uses current directory.
        """
        self.output_dir = output_dir or os.getcwd()
        os.makedirs(self.output_dir, exist_ok=True)

    def _file_path(self, filename: Optional[str], extension: str) -> str:
        if filename is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"programs_{timestamp}.{extension}"
        return os.path.join(self.output_dir, filename)

    def export_programs_csv(
        self,
        programs: List[ProgramInfo],
        filename: Optional[str] = None
    ) -> str:
        """Export programs list to CSV file.

        Args:
            programs: List of installed programs
            filename: Output filename. If None, generates timestamp-based name.

        Returns:
            Path to exported file
        """
        file_path = self._file_path(filename, "csv")

        # utf-8-sig so that Excel detects the encoding
        with open(file_path, 'w', newline='', encoding='utf-8-sig') as f:
            writer = csv.writer(f)
            writer.writerow([header for header, _ in CSV_COLUMNS])

            for program in programs:
                data = program.to_dict()
                writer.writerow([
                    "" if data[field] is None else data[field]
                    for _, field in CSV_COLUMNS
                ])

        logger.info(f"Exported {len(programs)} programs to CSV: {file_path}")
        return file_path

    def export_programs_json(
        self,
        programs: List[ProgramInfo],
        filename: Optional[str] = None,
        include_system_info: bool = True
    ) -> str:
        """Export programs list to JSON file.

        Args:
            programs: List of installed programs
            filename: Output filename. If None, generates timestamp-based name.
            include_system_info: Whether to include system information

        Returns:
            Path to exported file
        """
        file_path = self._file_path(filename, "json")

        data = {
            "export_date": datetime.now().isoformat(),
            "total_programs": len(programs),
            "programs": [program.to_dict() for program in programs],
        }

        if include_system_info:
            data["system_info"] = get_system_info()

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.info(f"Exported {len(programs)} programs to JSON: {file_path}")
        return file_path
