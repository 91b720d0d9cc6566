"""
Tests for persisted properties, triggers and state reset.
"""

import json

from empty_groups.state import (
    CURSOR_KEY, TRIGGERS_KEY, JsonPropertyStore, TriggerRegistry, clear_persisted_state
)


class TestJsonPropertyStore:
    """Tests for JsonPropertyStore."""

    def test_get_missing_file(self, tmp_path):
        store = JsonPropertyStore(tmp_path / "properties.json")
        assert store.get("anything") is None

    def test_set_get_delete(self, tmp_path):
        path = tmp_path / "state" / "properties.json"
        store = JsonPropertyStore(path)

        store.set(CURSOR_KEY, "token-1")
        assert store.get(CURSOR_KEY) == "token-1"
        assert json.loads(path.read_text()) == {CURSOR_KEY: "token-1"}

        store.delete(CURSOR_KEY)
        assert store.get(CURSOR_KEY) is None
        assert store.keys() == []

    def test_delete_missing_key(self, tmp_path):
        store = JsonPropertyStore(tmp_path / "properties.json")
        store.delete("missing")
        assert not (tmp_path / "properties.json").exists()

    def test_values_persist_across_instances(self, tmp_path):
        path = tmp_path / "properties.json"
        JsonPropertyStore(path).set("key", {"nested": [1, 2]})

        assert JsonPropertyStore(path).get("key") == {"nested": [1, 2]}


class TestTriggerRegistry:
    """Tests for TriggerRegistry."""

    def test_register_and_cancel(self, tmp_path):
        registry = TriggerRegistry(JsonPropertyStore(tmp_path / "p.json"))

        registry.register("t1", "list_empty_groups", "every 1 hour")
        registry.register("t2", "other_job")

        assert [t["id"] for t in registry.list_triggers()] == ["t1", "t2"]
        assert registry.cancel("t1") is True
        assert registry.cancel("t1") is False
        assert [t["id"] for t in registry.list_triggers()] == ["t2"]

    def test_cancel_last_trigger_removes_key(self, tmp_path):
        store = JsonPropertyStore(tmp_path / "p.json")
        registry = TriggerRegistry(store)
        registry.register("t1", "list_empty_groups")

        registry.cancel("t1")

        assert store.get(TRIGGERS_KEY) is None


class TestClearPersistedState:
    """Tests for clear_persisted_state."""

    def test_clears_cursor_and_owned_triggers(self, tmp_path):
        store = JsonPropertyStore(tmp_path / "p.json")
        registry = TriggerRegistry(store)
        store.set(CURSOR_KEY, "token-9")
        registry.register("t1", "list_empty_groups")
        registry.register("t2", "delete_empty_groups")
        registry.register("t3", "someone_elses_job")

        cancelled = clear_persisted_state(
            store, registry, ["list_empty_groups", "reset_and_start_over", "delete_empty_groups"]
        )

        assert cancelled == 2
        assert store.get(CURSOR_KEY) is None
        assert [t["id"] for t in registry.list_triggers()] == ["t3"]

    def test_nothing_to_clear(self, tmp_path):
        store = JsonPropertyStore(tmp_path / "p.json")

        assert clear_persisted_state(store, TriggerRegistry(store), ["list_empty_groups"]) == 0
