"""
Empty Group Scanner

Walks every group of the customer, records the ones with neither members nor
owners in the report sheet, and emails a summary when any are found.
"""

import logging
from datetime import timezone, tzinfo
from typing import Optional

from empty_groups.directory import DirectoryClient
from empty_groups.models import Group, ReportRow, ScanResult
from empty_groups.notifier import EmailNotifier
from empty_groups.sheet import ReportSheet
from empty_groups.state import CURSOR_KEY, PropertyStore


logger = logging.getLogger(__name__)


class EmptyGroupScanner:
    """
    Orchestrates a full scan of the directory.

    Every group is evaluated exactly once per run and rows are written in
    discovery order. Any directory error aborts the scan.
    """

    def __init__(
        self,
        directory: DirectoryClient,
        sheet: ReportSheet,
        notifier: EmailNotifier,
        store: Optional[PropertyStore] = None,
        tz: tzinfo = timezone.utc,
    ):
        """
        Initialize the scanner.

        Args:
            directory: Directory client used to list groups, members and owners
            sheet: Report sheet receiving one row per empty group
            notifier: Sends the summary email
            store: Optional property store recording the page token of a scan in progress
            tz: Timezone for the creation date column
        """
        self.directory = directory
        self.sheet = sheet
        self.notifier = notifier
        self.store = store
        self.tz = tz

    def is_empty_group(self, group: Group) -> bool:
        """
        Check whether a group has no members and no owners.

        Members and owners come from two separate calls and are checked
        independently. The counts are stored on the group.
        """
        members = self.directory.list_members(group.id)
        owners = self.directory.list_owners(group.id)

        group.member_count = len(members)
        group.owner_count = len(owners)

        return not members and not owners

    def run_scan(self) -> ScanResult:
        """
        Reset the report sheet and record every empty group.

        Returns:
            ScanResult with the rows written in this run
        """
        logger.info("Starting empty group scan")
        self.sheet.reset()

        result = ScanResult()

        for page in self.directory.iter_group_pages():
            for group in page.groups:
                result.groups_evaluated += 1

                if not self.is_empty_group(group):
                    continue

                row = ReportRow.from_group(group, self.tz)
                self.sheet.append_row(row)
                result.rows.append(row)
                result.empty_groups += 1
                logger.debug(f"Empty group found: {group.email}")

            if self.store is not None:
                if page.next_cursor:
                    self.store.set(CURSOR_KEY, page.next_cursor)
                else:
                    self.store.delete(CURSOR_KEY)

        logger.info(
            f"Scan finished: {result.groups_evaluated} groups evaluated, "
            f"{result.empty_groups} empty"
        )

        if result.empty_groups > 0:
            result.domain = self.directory.get_customer_primary_domain(self.directory.customer_id)
            self.notifier.send_report(result.empty_groups, result.domain)
            result.notified = True
        else:
            logger.info("No empty groups found, no report sent")

        return result
