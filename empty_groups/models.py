"""
Data Models for Google Workspace Groups

This module defines Pydantic models for directory groups, group members and
the rows of the empty group report sheet.
"""

from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict


DATE_FORMAT = "%Y-%m-%d"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DELETED_PREFIX = "Deleted at"
FAILED_STATUS = "Failed to delete"

REPORT_HEADER = ["Group Name", "Members", "Owners", "Creation Date", "Email Address"]


class MemberRole(str, Enum):
    """Roles a member can hold in a Google group."""
    MEMBER = "MEMBER"
    MANAGER = "MANAGER"
    OWNER = "OWNER"


class Group(BaseModel):
    """Google Workspace group entity."""

    id: str = Field(..., description="Unique group identifier")
    name: str = Field("", description="Group display name")
    email: str = Field(..., description="Group email address")
    created_at: Optional[datetime] = Field(None, description="When the group was created")
    description: Optional[str] = Field(None, description="Group description")

    # Populated by the scan
    member_count: Optional[int] = Field(None, description="Number of direct members")
    owner_count: Optional[int] = Field(None, description="Number of owners")

    metadata: Dict[str, Any] = Field(default_factory=dict, description="Raw API resource")

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True
    )


class Member(BaseModel):
    """Member of a Google group."""

    id: str = Field(..., description="Unique member identifier")
    email: Optional[str] = Field(None, description="Member email address")
    role: MemberRole = Field(MemberRole.MEMBER, description="Role in the group")
    type: Optional[str] = Field(None, description="USER, GROUP, CUSTOMER or EXTERNAL")
    status: Optional[str] = Field(None, description="Membership status")

    model_config = ConfigDict(str_strip_whitespace=True)


class GroupPage(BaseModel):
    """One page of a group listing."""

    groups: List[Group] = Field(default_factory=list)
    next_cursor: Optional[str] = Field(None, description="Token for next page")


def format_date(value: Optional[datetime], tz: tzinfo = timezone.utc) -> str:
    """Render a timestamp as yyyy-MM-dd in the given timezone."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz).strftime(DATE_FORMAT)


def deleted_status(when: datetime, tz: tzinfo = timezone.utc) -> str:
    """Status annotation written after a successful deletion."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return f"{DELETED_PREFIX} {when.astimezone(tz).strftime(TIMESTAMP_FORMAT)}"


class ReportRow(BaseModel):
    """A row of the empty group report sheet."""

    name: str = Field("", description="Group name (column A)")
    members: str = Field("0", description="Member count at write time (column B)")
    owners: str = Field("0", description="Owner count at write time (column C)")
    creation_date: str = Field("", description="yyyy-MM-dd creation date (column D)")
    email: str = Field("", description="Group email address (column E)")
    status: Optional[str] = Field(None, description="Deletion status (column F)")

    @classmethod
    def from_group(cls, group: Group, tz: tzinfo = timezone.utc) -> "ReportRow":
        """Build the row for a group with no members and no owners."""
        return cls(
            name=group.name,
            members=str(group.member_count or 0),
            owners=str(group.owner_count or 0),
            creation_date=format_date(group.created_at, tz),
            email=group.email,
        )

    @classmethod
    def from_values(cls, values: List[Any]) -> "ReportRow":
        """Parse a row as returned by the Sheets API (trailing blanks are omitted)."""
        cells = [str(v) if v is not None else "" for v in values] + [""] * 6
        return cls(
            name=cells[0],
            members=cells[1],
            owners=cells[2],
            creation_date=cells[3],
            email=cells[4].strip(),
            status=cells[5] or None,
        )

    def to_values(self) -> List[str]:
        """Cells A..E as written by a scan."""
        return [self.name, self.members, self.owners, self.creation_date, self.email]

    @property
    def is_deleted(self) -> bool:
        return bool(self.status and self.status.startswith(DELETED_PREFIX))


class ScanResult(BaseModel):
    """Outcome of one scan."""

    groups_evaluated: int = 0
    empty_groups: int = 0
    rows: List[ReportRow] = Field(default_factory=list)
    domain: Optional[str] = None
    notified: bool = False


class DeletionOutcome(BaseModel):
    """Result of deleting the group behind one report row."""

    row_index: int
    email: str
    status: str
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class DeletionResult(BaseModel):
    """Outcome of one deletion pass."""

    outcomes: List[DeletionOutcome] = Field(default_factory=list)

    @property
    def deleted(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.succeeded)
