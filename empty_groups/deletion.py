"""
Deletion of the groups recorded in the report sheet.
"""

import logging
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional

from empty_groups.directory import DirectoryClient, GroupDeletionError
from empty_groups.models import FAILED_STATUS, DeletionOutcome, DeletionResult, deleted_status
from empty_groups.sheet import ReportSheet


logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EmptyGroupDeleter:
    """Deletes every group listed in the report and annotates each row."""

    def __init__(
        self,
        directory: DirectoryClient,
        sheet: ReportSheet,
        tz: tzinfo = timezone.utc,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.directory = directory
        self.sheet = sheet
        self.tz = tz
        self.clock = clock or _utc_now

    def delete_all(self) -> DeletionResult:
        """
        Delete the group of every row, in stored order.

        A failed deletion is annotated and logged; the remaining rows are
        still processed. Failed deletions are not retried.

        Returns:
            DeletionResult with one outcome per row
        """
        rows = self.sheet.read_all_rows()
        logger.info(f"Deleting {len(rows)} groups listed in the report")

        result = DeletionResult()

        for index, row in enumerate(rows, start=1):
            if not row.email:
                logger.error(f"Row {index} has no email address, skipping")
                status = FAILED_STATUS
                result.outcomes.append(
                    DeletionOutcome(row_index=index, email="", status=status, error="Missing email address")
                )
                self.sheet.annotate(index, status)
                continue

            try:
                self.directory.delete_group(row.email)
            except GroupDeletionError as e:
                logger.error(str(e))
                status = FAILED_STATUS
                result.outcomes.append(
                    DeletionOutcome(row_index=index, email=row.email, status=status, error=str(e.cause))
                )
            else:
                status = deleted_status(self.clock(), self.tz)
                logger.info(f"Deleted group {row.email}")
                result.outcomes.append(DeletionOutcome(row_index=index, email=row.email, status=status))

            self.sheet.annotate(index, status)

        logger.info(f"Deletion finished: {result.deleted} deleted, {result.failed} failed")
        return result
