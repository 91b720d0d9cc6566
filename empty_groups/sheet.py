"""
Report Sheet Module

Owns the lifecycle of the Google Sheets tab that lists empty groups: create
if absent, clear, header, appended rows and per-row deletion status.
"""

import logging
from typing import List, Optional

from empty_groups.models import REPORT_HEADER, ReportRow


logger = logging.getLogger(__name__)

STATUS_COLUMN = "F"


class ReportSheet:
    """
    Google Sheets backed report.

    Row 1 is the header; data rows are contiguous from row 2. Rows are never
    removed individually, only reset() clears them.
    """

    def __init__(self, service, spreadsheet_id: str, sheet_name: str = "Empty Groups"):
        """
        Initialize the report sheet.

        Args:
            service: googleapiclient Resource for ('sheets', 'v4')
            spreadsheet_id: Spreadsheet holding the report
            sheet_name: Tab name of the report
        """
        if not spreadsheet_id:
            raise ValueError("spreadsheet_id is required")

        self.service = service
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name

    def _range(self, cells: str = "") -> str:
        quoted = "'" + self.sheet_name.replace("'", "''") + "'"
        return f"{quoted}!{cells}" if cells else quoted

    def _find_sheet_id(self) -> Optional[int]:
        """Return the numeric id of the report tab, or None if it does not exist."""
        metadata = self.service.spreadsheets().get(
            spreadsheetId=self.spreadsheet_id,
            fields="sheets.properties"
        ).execute()

        for sheet in metadata.get("sheets", []):
            properties = sheet.get("properties", {})
            if properties.get("title") == self.sheet_name:
                return properties.get("sheetId")
        return None

    def _ensure_sheet(self) -> int:
        """Locate the report tab, creating it when absent."""
        sheet_id = self._find_sheet_id()
        if sheet_id is not None:
            return sheet_id

        logger.info(f"Creating sheet '{self.sheet_name}'")
        response = self.service.spreadsheets().batchUpdate(
            spreadsheetId=self.spreadsheet_id,
            body={"requests": [{"addSheet": {"properties": {"title": self.sheet_name}}}]}
        ).execute()
        return response["replies"][0]["addSheet"]["properties"]["sheetId"]

    def reset(self) -> None:
        """Clear the tab and write the bold, frozen header row."""
        sheet_id = self._ensure_sheet()
        values = self.service.spreadsheets().values()

        values.clear(
            spreadsheetId=self.spreadsheet_id,
            range=self._range(),
            body={}
        ).execute()

        values.update(
            spreadsheetId=self.spreadsheet_id,
            range=self._range("A1"),
            valueInputOption="RAW",
            body={"values": [REPORT_HEADER]}
        ).execute()

        self.service.spreadsheets().batchUpdate(
            spreadsheetId=self.spreadsheet_id,
            body={"requests": [
                {
                    "repeatCell": {
                        "range": {"sheetId": sheet_id, "startRowIndex": 0, "endRowIndex": 1},
                        "cell": {"userEnteredFormat": {"textFormat": {"bold": True}}},
                        "fields": "userEnteredFormat.textFormat.bold",
                    }
                },
                {
                    "updateSheetProperties": {
                        "properties": {"sheetId": sheet_id, "gridProperties": {"frozenRowCount": 1}},
                        "fields": "gridProperties.frozenRowCount",
                    }
                },
            ]}
        ).execute()

        logger.debug(f"Sheet '{self.sheet_name}' reset")

    def append_row(self, row: ReportRow) -> None:
        """Append one row after the last used row."""
        self.service.spreadsheets().values().append(
            spreadsheetId=self.spreadsheet_id,
            range=self._range("A:E"),
            valueInputOption="RAW",
            insertDataOption="INSERT_ROWS",
            body={"values": [row.to_values()]}
        ).execute()

    def read_all_rows(self) -> List[ReportRow]:
        """Read every data row, excluding the header."""
        response = self.service.spreadsheets().values().get(
            spreadsheetId=self.spreadsheet_id,
            range=self._range("A2:F")
        ).execute()

        return [ReportRow.from_values(values) for values in response.get("values", [])]

    def annotate(self, row_index: int, status: str) -> None:
        """
        Write a deletion status for a data row.

        Args:
            row_index: 1-based position of the row after the header
            status: Text written into the status column
        """
        if row_index < 1:
            raise ValueError(f"row_index must be 1 or greater, got {row_index}")

        self.service.spreadsheets().values().update(
            spreadsheetId=self.spreadsheet_id,
            range=self._range(f"{STATUS_COLUMN}{row_index + 1}"),
            valueInputOption="RAW",
            body={"values": [[status]]}
        ).execute()
