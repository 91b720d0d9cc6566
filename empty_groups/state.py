"""
Persisted properties and scheduled triggers.

The program only depends on a narrow get/set/delete key-value interface. The
default store is a JSON file; scheduled triggers registered by external
tooling live under the ``triggers`` key of the same store.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol


logger = logging.getLogger(__name__)

CURSOR_KEY = "pageToken"
TRIGGERS_KEY = "triggers"


class PropertyStore(Protocol):
    """Key-value store for persisted properties."""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class JsonPropertyStore:
    """Property store persisted as a JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as handle:
            return json.load(handle) or {}

    def _save(self, payload: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
        tmp_path.replace(self.path)

    def get(self, key: str) -> Optional[Any]:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        payload = self._load()
        payload[key] = value
        self._save(payload)

    def delete(self, key: str) -> None:
        payload = self._load()
        if key in payload:
            del payload[key]
            self._save(payload)

    def keys(self) -> List[str]:
        return list(self._load().keys())


class TriggerRegistry:
    """Scheduled trigger records kept in a property store."""

    def __init__(self, store: PropertyStore) -> None:
        self.store = store

    def list_triggers(self) -> List[Dict[str, Any]]:
        return list(self.store.get(TRIGGERS_KEY) or [])

    def register(self, trigger_id: str, handler: str, schedule: str = "") -> Dict[str, Any]:
        trigger = {"id": trigger_id, "handler": handler, "schedule": schedule}
        triggers = [t for t in self.list_triggers() if t.get("id") != trigger_id]
        triggers.append(trigger)
        self.store.set(TRIGGERS_KEY, triggers)
        return trigger

    def cancel(self, trigger_id: str) -> bool:
        triggers = self.list_triggers()
        remaining = [t for t in triggers if t.get("id") != trigger_id]
        if len(remaining) == len(triggers):
            return False

        if remaining:
            self.store.set(TRIGGERS_KEY, remaining)
        else:
            self.store.delete(TRIGGERS_KEY)
        return True


def clear_persisted_state(
    store: PropertyStore,
    triggers: TriggerRegistry,
    handlers: Iterable[str],
) -> int:
    """
    Discard the stored page token and cancel this program's scheduled triggers.

    Args:
        store: Property store holding the page token
        triggers: Registry of scheduled triggers
        handlers: Command names owned by this program

    Returns:
        Number of cancelled triggers
    """
    store.delete(CURSOR_KEY)

    owned = set(handlers)
    cancelled = 0
    for trigger in triggers.list_triggers():
        if trigger.get("handler") in owned and triggers.cancel(trigger.get("id")):
            cancelled += 1
            logger.debug(f"Cancelled trigger {trigger.get('id')} ({trigger.get('handler')})")

    logger.info(f"Persisted state cleared, {cancelled} trigger(s) cancelled")
    return cancelled
