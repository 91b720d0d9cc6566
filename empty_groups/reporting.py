"""
Reporting and Output Formatting Module

Exports the rows of the report sheet to local CSV, JSON and Excel files.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Union
from datetime import datetime, timezone

import pandas as pd

from empty_groups.models import REPORT_HEADER, ReportRow


logger = logging.getLogger(__name__)

EXPORT_COLUMNS = REPORT_HEADER + ["Deletion Status"]


class ReportExporter:
    """
    Writes report rows to local files in one or more formats.
    """

    def __init__(
        self,
        output_directory: Union[str, Path] = "./reports",
        timestamp_format: str = "%Y%m%d_%H%M%S",
        include_timestamp: bool = True,
    ):
        """
        Initialize the exporter.

        Args:
            output_directory: Directory to save exports
            timestamp_format: strftime format of the filename timestamp
            include_timestamp: Whether to include timestamp in filenames
        """
        self.output_directory = Path(output_directory)
        self.output_directory.mkdir(parents=True, exist_ok=True)
        self.timestamp_format = timestamp_format
        self.include_timestamp = include_timestamp
        logger.info(f"Report exporter initialized with output directory: {self.output_directory}")

    def _file_path(self, extension: str) -> Path:
        if self.include_timestamp:
            timestamp = datetime.now(timezone.utc).strftime(self.timestamp_format)
            return self.output_directory / f"empty_groups_{timestamp}.{extension}"
        return self.output_directory / f"empty_groups.{extension}"

    def to_dataframe(self, rows: List[ReportRow]) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    'Group Name': row.name,
                    'Members': row.members,
                    'Owners': row.owners,
                    'Creation Date': row.creation_date,
                    'Email Address': row.email,
                    'Deletion Status': row.status or '',
                }
                for row in rows
            ],
            columns=EXPORT_COLUMNS,
        )

    def export(self, rows: List[ReportRow], formats: List[str]) -> Dict[str, Path]:
        """
        Export rows in all specified formats.

        Args:
            rows: Report rows
            formats: List of format types ('csv', 'json', 'excel')

        Returns:
            Dictionary mapping format names to generated file paths
        """
        generated_files = {}

        for format_type in formats:
            try:
                if format_type.lower() == 'csv':
                    generated_files['csv'] = self.export_csv(rows)
                elif format_type.lower() == 'json':
                    generated_files['json'] = self.export_json(rows)
                elif format_type.lower() == 'excel':
                    generated_files['excel'] = self.export_excel(rows)
                else:
                    logger.warning(f"Unknown format type: {format_type}")

            except Exception as e:
                logger.error(f"Failed to export {format_type} report: {e}")

        return generated_files

    def export_csv(self, rows: List[ReportRow]) -> Path:
        file_path = self._file_path("csv")
        self.to_dataframe(rows).to_csv(file_path, index=False, encoding='utf-8')
        logger.info(f"Exported CSV report: {file_path}")
        return file_path

    def export_json(self, rows: List[ReportRow]) -> Path:
        file_path = self._file_path("json")
        payload = {
            'metadata': {
                'generated_at': datetime.now(timezone.utc).isoformat(),
                'total_groups': len(rows),
                'deleted_groups': sum(1 for row in rows if row.is_deleted),
            },
            'groups': [row.model_dump() for row in rows],
        }
        with open(file_path, 'w', encoding='utf-8') as jsonfile:
            json.dump(payload, jsonfile, indent=2, ensure_ascii=False)
        logger.info(f"Exported JSON report: {file_path}")
        return file_path

    def export_excel(self, rows: List[ReportRow]) -> Path:
        file_path = self._file_path("xlsx")

        with pd.ExcelWriter(file_path, engine='openpyxl') as writer:
            self.to_dataframe(rows).to_excel(writer, sheet_name='Empty Groups', index=False)

            worksheet = writer.sheets['Empty Groups']
            worksheet.freeze_panes = 'A2'
            for column_cells in worksheet.columns:
                max_length = max(len(str(cell.value or '')) for cell in column_cells)
                worksheet.column_dimensions[column_cells[0].column_letter].width = min(max_length + 2, 60)

        logger.info(f"Exported Excel report: {file_path}")
        return file_path
