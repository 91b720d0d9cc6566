"""
Data Retrieval Layer for the Admin SDK Directory API

This module wraps the group, member and customer endpoints of the Google
Workspace Directory API used to find and delete empty groups.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional


from empty_groups.models import Group, GroupPage, Member, MemberRole


logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 200


class GroupDeletionError(Exception):
    """Raised when a group could not be deleted."""

    def __init__(self, email: str, cause: Exception):
        super().__init__(f"Failed to delete group {email}: {cause}")
        self.email = email
        self.cause = cause


class DirectoryClient:
    """
    Client for the Google Workspace Directory API.

    All listing calls are synchronous. Errors from the API propagate to the
    caller, except from delete_group which wraps any failure in GroupDeletionError.
    """

    def __init__(self, service, customer_id: str = "my_customer", page_size: int = MAX_PAGE_SIZE):
        """
        Initialize the directory client.

        Args:
            service: googleapiclient Resource for ('admin', 'directory_v1')
            customer_id: Customer whose groups are listed
            page_size: Groups per page (at most 200)
        """
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")

        self.service = service
        self.customer_id = customer_id
        self.page_size = page_size

    def list_groups(self, cursor: Optional[str] = None) -> GroupPage:
        """
        Retrieve one page of groups for the configured customer.

        Args:
            cursor: Page token returned by the previous call, None for the first page

        Returns:
            GroupPage with the groups and the token of the next page, if any
        """
        params: Dict[str, Any] = {"customer": self.customer_id, "maxResults": self.page_size}
        if cursor:
            params["pageToken"] = cursor

        logger.debug(f"Listing groups for customer {self.customer_id} (cursor: {cursor})")
        response = self.service.groups().list(**params).execute()

        groups = [self._parse_group(data) for data in response.get("groups", [])]
        return GroupPage(groups=groups, next_cursor=response.get("nextPageToken") or None)

    def iter_group_pages(self) -> Iterator[GroupPage]:
        """
        Iterate over every page of groups, starting from the first one.

        Yields:
            GroupPage objects until the listing returns no cursor
        """
        cursor = None
        page_number = 0

        while True:
            page = self.list_groups(cursor)
            page_number += 1
            logger.debug(f"Fetched page {page_number} with {len(page.groups)} groups")
            yield page

            cursor = page.next_cursor
            if not cursor:
                break

    def list_members(self, group_id: str) -> List[Member]:
        """
        Retrieve all direct members of a group.

        Args:
            group_id: Group identifier or email

        Returns:
            List of Member objects (empty if the group has none)
        """
        return [self._parse_member(data) for data in self._paginate_members(group_id)]

    def list_owners(self, group_id: str) -> List[Member]:
        """
        Retrieve the owners of a group.

        Args:
            group_id: Group identifier or email

        Returns:
            List of Member objects holding the OWNER role
        """
        return [
            self._parse_member(data)
            for data in self._paginate_members(group_id, roles=MemberRole.OWNER.value)
        ]

    def _paginate_members(self, group_id: str, **kwargs: Any) -> Iterator[Dict[str, Any]]:
        """Yield raw member resources across all pages."""
        members = self.service.members()
        request = members.list(groupKey=group_id, **kwargs)

        while request is not None:
            response = request.execute()
            for item in response.get("members", []):
                yield item
            request = members.list_next(request, response)

    def get_customer_primary_domain(self, customer_id: Optional[str] = None) -> str:
        """
        Retrieve the primary domain of a customer.

        Args:
            customer_id: Customer key (defaults to the configured customer)

        Returns:
            Primary domain name
        """
        customer_key = customer_id or self.customer_id
        logger.debug(f"Retrieving primary domain of customer {customer_key}")

        customer = self.service.customers().get(customerKey=customer_key).execute()
        return customer.get("customerDomain", "")

    def delete_group(self, email: str) -> None:
        """
        Delete a group by email address. No retry is attempted.

        Args:
            email: Group email address

        Raises:
            GroupDeletionError: If the deletion fails for any reason
        """
        logger.debug(f"Deleting group {email}")
        try:
            self.service.groups().delete(groupKey=email).execute()
        except Exception as e:
            raise GroupDeletionError(email, e) from e

    def _parse_group(self, group_data: Dict[str, Any]) -> Group:
        """
        Parse group data from API response.

        Args:
            group_data: Raw group resource

        Returns:
            Group object
        """
        return Group(
            id=group_data.get("id", ""),
            name=group_data.get("name", ""),
            email=group_data.get("email", ""),
            description=group_data.get("description"),
            created_at=self._parse_timestamp(group_data.get("creationTime")),
            metadata=group_data
        )

    def _parse_member(self, member_data: Dict[str, Any]) -> Member:
        role = member_data.get("role", MemberRole.MEMBER.value)
        try:
            member_role = MemberRole(role.upper())
        except (ValueError, AttributeError):
            logger.warning(f"Unknown member role: {role}")
            member_role = MemberRole.MEMBER

        return Member(
            id=member_data.get("id", ""),
            email=member_data.get("email"),
            role=member_role,
            type=member_data.get("type"),
            status=member_data.get("status"),
        )

    @staticmethod
    def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
        """Parse an RFC 3339 timestamp, returning None when absent or malformed."""
        if not value:
            return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Unparseable timestamp: {value}")
            return None
