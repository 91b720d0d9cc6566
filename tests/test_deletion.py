"""
Tests for the deletion of recorded empty groups.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

from empty_groups.deletion import EmptyGroupDeleter
from empty_groups.directory import DirectoryClient
from empty_groups.dummy_data import InMemoryDirectoryClient, InMemoryReportSheet
from empty_groups.models import FAILED_STATUS, Group, ReportRow


FIXED_NOW = datetime(2024, 2, 29, 16, 45, 0, tzinfo=timezone.utc)


class TestEmptyGroupDeleter:
    """Tests for EmptyGroupDeleter."""

    def setup_method(self):
        """Set up a report with three recorded groups."""
        self.sheet = InMemoryReportSheet()
        self.sheet.reset()
        for name in ("alpha", "beta", "gamma"):
            self.sheet.append_row(ReportRow(name=name, creation_date="2020-01-01", email=f"{name}@example.com"))

        self.directory = InMemoryDirectoryClient(
            groups=[Group(id=name, email=f"{name}@example.com") for name in ("alpha", "beta", "gamma")],
            failing_deletes={"beta@example.com"},
        )

    def test_failure_does_not_stop_remaining_rows(self):
        deleter = EmptyGroupDeleter(self.directory, self.sheet, clock=lambda: FIXED_NOW)

        result = deleter.delete_all()

        assert self.directory.deleted == ["alpha@example.com", "gamma@example.com"]
        assert [row[5] for row in self.sheet.values[1:]] == [
            "Deleted at 2024-02-29 16:45:00",
            FAILED_STATUS,
            "Deleted at 2024-02-29 16:45:00",
        ]
        assert result.deleted == 2
        assert result.failed == 1
        assert result.outcomes[1].row_index == 2
        assert "Resource Not Found" in result.outcomes[1].error

    def test_status_uses_configured_timezone(self):
        deleter = EmptyGroupDeleter(
            self.directory, self.sheet, tz=ZoneInfo("Europe/Berlin"), clock=lambda: FIXED_NOW
        )

        deleter.delete_all()

        assert self.sheet.values[1][5] == "Deleted at 2024-02-29 17:45:00"

    def test_header_row_untouched(self):
        header = list(self.sheet.values[0])

        EmptyGroupDeleter(self.directory, self.sheet, clock=lambda: FIXED_NOW).delete_all()

        assert self.sheet.values[0] == header

    def test_empty_report(self):
        sheet = InMemoryReportSheet()
        sheet.reset()

        result = EmptyGroupDeleter(self.directory, sheet).delete_all()

        assert result.outcomes == []
        assert self.directory.deleted == []

    def test_every_row_is_attempted_again(self):
        """Rows already marked deleted are still sent for deletion."""
        self.directory.failing_deletes = set()
        deleter = EmptyGroupDeleter(self.directory, self.sheet, clock=lambda: FIXED_NOW)

        deleter.delete_all()
        deleter.delete_all()

        assert self.directory.deleted.count("alpha@example.com") == 2

    def test_row_without_email_is_not_sent(self):
        self.sheet.append_row(ReportRow(name="cleared", creation_date="2020-01-01", email=""))
        self.directory.failing_deletes = set()
        deleter = EmptyGroupDeleter(self.directory, self.sheet, clock=lambda: FIXED_NOW)

        result = deleter.delete_all()

        assert "" not in self.directory.deleted
        assert self.sheet.values[4][5] == FAILED_STATUS
        assert result.outcomes[3].error == "Missing email address"
        assert result.deleted == 3


class TestDeletionWithDirectoryClient:
    """Deletion against a DirectoryClient backed by a mocked service."""

    def setup_method(self):
        self.sheet = InMemoryReportSheet()
        self.sheet.reset()
        for name in ("a", "b", "c"):
            self.sheet.append_row(ReportRow(name=name, email=f"{name}@example.com"))

        self.requested = []

        def delete(groupKey):
            self.requested.append(groupKey)
            request = MagicMock()
            if groupKey == "b@example.com":
                request.execute.side_effect = TimeoutError("timed out")
            return request

        self.service = MagicMock()
        self.service.groups.return_value.delete.side_effect = delete

    def test_network_error_does_not_stop_remaining_rows(self):
        deleter = EmptyGroupDeleter(DirectoryClient(self.service), self.sheet, clock=lambda: FIXED_NOW)

        result = deleter.delete_all()

        assert self.requested == ["a@example.com", "b@example.com", "c@example.com"]
        assert [row[5] for row in self.sheet.values[1:]] == [
            "Deleted at 2024-02-29 16:45:00",
            FAILED_STATUS,
            "Deleted at 2024-02-29 16:45:00",
        ]
        assert result.failed == 1
        assert result.outcomes[1].error == "timed out"
