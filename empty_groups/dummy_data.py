"""
Dummy Data Generator Module

Generates a realistic synthetic Google Workspace directory and provides
in-memory stand-ins for the directory, the report sheet and the notifier.
These back the ``--demo`` mode of the CLI and the test-suite, and need no
Google credentials.
"""

import random
import logging
from typing import Dict, List, Optional, Set, Tuple
from datetime import timezone

from faker import Faker

from empty_groups.directory import DirectoryClient, GroupDeletionError
from empty_groups.models import REPORT_HEADER, Group, GroupPage, Member, MemberRole, ReportRow


logger = logging.getLogger(__name__)


class DummyDataGenerator:
    """
    Generates dummy groups with members and owners.
    """

    def __init__(self, seed: int = None, domain: Optional[str] = None):
        """
        Initialize the dummy data generator.

        Args:
            seed: Random seed for reproducible data generation
            domain: Primary domain of the synthetic customer
        """
        if seed is not None:
            random.seed(seed)
            Faker.seed(seed)

        self.fake = Faker()
        self.domain = domain or self.fake.domain_name()
        self.generated_groups: List[Group] = []
        self.members: Dict[str, List[Member]] = {}
        self.owners: Dict[str, List[Member]] = {}

        logger.info("Dummy data generator initialized")

    def _member(self, role: MemberRole) -> Member:
        return Member(
            id=str(self.fake.random_number(digits=21, fix_len=True)),
            email=f"{self.fake.user_name()}@{self.domain}",
            role=role,
            type="USER",
            status="ACTIVE",
        )

    def generate_groups(self, count: int = 30, empty_ratio: float = 0.2) -> List[Group]:
        """
        Generate dummy groups with random memberships.

        Args:
            count: Number of groups to generate
            empty_ratio: Share of groups left without members and owners

        Returns:
            List of Group objects
        """
        if not 0.0 <= empty_ratio <= 1.0:
            raise ValueError("empty_ratio must be between 0 and 1")

        groups = []
        empty_count = round(count * empty_ratio)
        empty_indexes = set(random.sample(range(count), empty_count))

        for i in range(count):
            slug = f"{self.fake.word()}-{self.fake.word()}-{i}"
            group = Group(
                id=f"0{self.fake.hexify(text='^' * 15)}",
                name=slug.replace('-', ' ').title(),
                email=f"{slug}@{self.domain}",
                created_at=self.fake.date_time_between(start_date='-5y', end_date='now', tzinfo=timezone.utc),
            )
            groups.append(group)

            if i in empty_indexes:
                self.members[group.id] = []
                self.owners[group.id] = []
                continue

            owners = [self._member(MemberRole.OWNER) for _ in range(random.randint(0, 2))]
            plain = [self._member(MemberRole.MEMBER) for _ in range(random.randint(0, 8))]
            if not owners and not plain:
                plain.append(self._member(MemberRole.MEMBER))

            self.members[group.id] = owners + plain
            self.owners[group.id] = owners

        self.generated_groups = groups
        logger.info(f"Generated {len(groups)} dummy groups ({empty_count} empty)")
        return groups

    def build_directory(self, page_size: int = 200) -> "InMemoryDirectoryClient":
        """Wrap the generated data in an in-memory directory client."""
        if not self.generated_groups:
            raise ValueError("No groups available. Generate groups first.")

        return InMemoryDirectoryClient(
            groups=self.generated_groups,
            members=self.members,
            owners=self.owners,
            domain=self.domain,
            page_size=page_size,
        )


class InMemoryDirectoryClient(DirectoryClient):
    """Directory client serving groups from memory."""

    def __init__(
        self,
        groups: List[Group],
        members: Optional[Dict[str, List[Member]]] = None,
        owners: Optional[Dict[str, List[Member]]] = None,
        domain: str = "example.com",
        customer_id: str = "my_customer",
        page_size: int = 200,
        failing_deletes: Optional[Set[str]] = None,
    ):
        super().__init__(service=None, customer_id=customer_id, page_size=page_size)
        self.groups = list(groups)
        self.members = members or {}
        self.owners = owners or {}
        self.domain = domain
        self.failing_deletes = set(failing_deletes or ())
        self.deleted: List[str] = []
        self.pages_served = 0

    def list_groups(self, cursor: Optional[str] = None) -> GroupPage:
        start = int(cursor) if cursor else 0
        end = start + self.page_size
        self.pages_served += 1
        return GroupPage(
            groups=[g.model_copy() for g in self.groups[start:end]],
            next_cursor=str(end) if end < len(self.groups) else None,
        )

    def list_members(self, group_id: str) -> List[Member]:
        return list(self.members.get(group_id, []))

    def list_owners(self, group_id: str) -> List[Member]:
        return list(self.owners.get(group_id, []))

    def get_customer_primary_domain(self, customer_id: Optional[str] = None) -> str:
        return self.domain

    def delete_group(self, email: str) -> None:
        if email in self.failing_deletes:
            raise GroupDeletionError(email, RuntimeError("Resource Not Found: groupKey"))
        self.groups = [g for g in self.groups if g.email != email]
        self.deleted.append(email)


class InMemoryReportSheet:
    """Report sheet kept in memory as a list of cell rows."""

    def __init__(self, sheet_name: str = "Empty Groups"):
        self.sheet_name = sheet_name
        self.exists = False
        self.values: List[List[str]] = []
        self.header_bold = False
        self.frozen_rows = 0

    def reset(self) -> None:
        self.exists = True
        self.values = [list(REPORT_HEADER)]
        self.header_bold = True
        self.frozen_rows = 1

    def append_row(self, row: ReportRow) -> None:
        self.values.append(row.to_values())

    def read_all_rows(self) -> List[ReportRow]:
        return [ReportRow.from_values(values) for values in self.values[1:]]

    def annotate(self, row_index: int, status: str) -> None:
        if row_index < 1:
            raise ValueError(f"row_index must be 1 or greater, got {row_index}")
        cells = self.values[row_index]
        cells.extend([""] * (6 - len(cells)))
        cells[5] = status


class LoggingNotifier:
    """Notifier that logs the report instead of emailing it."""

    def __init__(self, recipient: str = "admin@example.com"):
        self.recipient = recipient
        self.sent: List[Tuple[int, str]] = []

    def send_report(self, count: int, domain: str) -> None:
        self.sent.append((count, domain))
        logger.info(f"[DEMO] Would email {self.recipient}: {count} empty groups in {domain}")
