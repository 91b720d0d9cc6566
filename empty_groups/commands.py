"""
Command surface: the three menu entries of the tool mapped to handlers.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from empty_groups.deletion import EmptyGroupDeleter
from empty_groups.scanner import EmptyGroupScanner
from empty_groups.state import PropertyStore, TriggerRegistry, clear_persisted_state


logger = logging.getLogger(__name__)

LIST_EMPTY_GROUPS = "list_empty_groups"
RESET_AND_START_OVER = "reset_and_start_over"
DELETE_EMPTY_GROUPS = "delete_empty_groups"

MENU_ITEMS: List[Tuple[str, str]] = [
    ("Start Listing Empty Groups", LIST_EMPTY_GROUPS),
    ("Reset and Start Over", RESET_AND_START_OVER),
    ("Delete Found Empty Groups", DELETE_EMPTY_GROUPS),
]

CONFIRM_PROMPT = "Are you sure you want to delete all found empty groups?"


class UnknownCommandError(Exception):
    """Raised when dispatching a command name that is not registered."""


class CommandSurface:
    """
    Dispatch table of user-invokable commands.

    Each command runs to completion (or to an uncaught error) before the next
    one can be invoked.
    """

    def __init__(
        self,
        scanner: EmptyGroupScanner,
        deleter: EmptyGroupDeleter,
        store: PropertyStore,
        triggers: TriggerRegistry,
        confirm: Callable[[str], bool],
    ):
        """
        Initialize the command surface.

        Args:
            scanner: Scan orchestrator
            deleter: Deletion orchestrator
            store: Property store holding the page token
            triggers: Scheduled trigger registry
            confirm: Yes/no prompt, returns True only on an explicit yes
        """
        self.scanner = scanner
        self.deleter = deleter
        self.store = store
        self.triggers = triggers
        self.confirm = confirm

    @property
    def commands(self) -> Dict[str, Callable[[], Any]]:
        return {
            LIST_EMPTY_GROUPS: self.list_empty_groups,
            RESET_AND_START_OVER: self.reset_and_start_over,
            DELETE_EMPTY_GROUPS: self.delete_empty_groups,
        }

    def dispatch(self, name: str) -> Any:
        """Run the handler registered under a command name."""
        try:
            handler = self.commands[name]
        except KeyError:
            raise UnknownCommandError(name)

        logger.debug(f"Dispatching command: {name}")
        return handler()

    def list_empty_groups(self):
        return self.scanner.run_scan()

    def reset_and_start_over(self):
        clear_persisted_state(self.store, self.triggers, self.commands.keys())
        return self.scanner.run_scan()

    def delete_empty_groups(self) -> Optional[Any]:
        """Delete the recorded groups after an explicit confirmation."""
        if not self.confirm(CONFIRM_PROMPT):
            logger.info("Deletion cancelled")
            return None
        return self.deleter.delete_all()
