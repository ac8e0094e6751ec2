"""
Tests for accessctl.audit — append-only recorder, snapshots and filters.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from accessctl.audit import (
    AuditEntry,
    AuditFilter,
    AuditRecorder,
    InMemoryAuditSink,
    thaw,
)
from accessctl.context import ActorContext
from accessctl.exceptions import AuditEntryNotFound, AuditWriteError
from accessctl.permissions import Role
from accessctl.policy import resolve
from accessctl.time import FixedClock


NOW = datetime(2025, 2, 18, 9, 15, 0, tzinfo=timezone.utc)
ALEX = ActorContext(
    actor_id="1",
    actor_name="Alex Rivera",
    role_at_time="super-admin",
    ip_address="192.168.1.45",
    user_agent="Chrome 121.0.0",
)
SARAH = ActorContext(actor_id="2", actor_name="Sarah Chen", role_at_time="manager")


class FailingSink:
    def append(self, entry):
        raise IOError("disk full")


def _recorder(sink=None):
    return AuditRecorder(sink=sink, clock=FixedClock(NOW))


# ── record ───────────────────────────────────────────────────

class TestRecord:
    def test_entry_fields(self):
        recorder = _recorder()
        entry = recorder.record(
            ALEX,
            "settings",
            "update_global_config",
            old_data={"store_name": "Lumina Alpha"},
            new_data={"store_name": "Lumina Premium Store"},
        )
        assert isinstance(entry, AuditEntry)
        assert entry.actor_id == "1"
        assert entry.actor_name == "Alex Rivera"
        assert entry.role_at_time == "super-admin"
        assert entry.module == "settings"
        assert entry.action == "update_global_config"
        assert entry.occurred_at == NOW
        assert entry.sequence == 1
        assert entry.ip_address == "192.168.1.45"
        assert entry.old_data == {"store_name": "Lumina Alpha"}

    def test_creation_and_destruction_events(self):
        recorder = _recorder()
        created = recorder.record(
            SARAH, "products", "create_product", new_data={"name": "Silk scarf"}
        )
        deleted = recorder.record(
            ALEX, "products", "delete_product", old_data={"id": "123"}
        )
        assert created.old_data is None
        assert deleted.new_data is None
        assert created.has_state_delta and deleted.has_state_delta

    def test_event_without_state(self):
        entry = _recorder().record(ALEX, "auth", "login")
        assert not entry.has_state_delta

    def test_snapshot_is_deep_copied(self):
        live = {"roles": ["role-manager"], "meta": {"level": 1}}
        entry = _recorder().record(SARAH, "users", "assign_role", new_data=live)
        live["roles"].append("role-sa")
        live["meta"]["level"] = 99
        live["extra"] = True
        assert thaw(entry.new_data) == {
            "roles": ["role-manager"],
            "meta": {"level": 1},
        }

    def test_snapshot_is_read_only(self):
        entry = _recorder().record(
            SARAH, "users", "assign_role", new_data={"roles": ["a"]}
        )
        with pytest.raises(TypeError):
            entry.new_data["roles"] = ["b"]
        with pytest.raises(AttributeError):
            entry.new_data["roles"].append("b")
        with pytest.raises(AttributeError):
            entry.action = "other"

    def test_previous_entry_snapshot_reused_as_old_data(self):
        recorder = _recorder()
        first = recorder.record(
            ALEX,
            "settings",
            "update_global_config",
            new_data={"api_keys": {"maps": "g"}, "tags": ["a"]},
        )
        second = recorder.record(
            ALEX,
            "settings",
            "update_global_config",
            old_data=first.new_data,
            new_data={"api_keys": {"maps": "h"}, "tags": ["a"]},
        )
        assert thaw(second.old_data) == {"api_keys": {"maps": "g"}, "tags": ["a"]}
        assert [d.field for d in recorder.diff(second.entry_id)] == ["api_keys"]

    def test_effective_matrix_snapshot(self):
        viewer = Role(role_id="r", name="r", permission_ids=["users.view"])
        matrix = resolve([viewer], [])
        entry = _recorder().record(ALEX, "users", "review_access", new_data=matrix)
        assert entry.new_data["users.view"] is True
        assert len(entry.new_data) == 60

    def test_non_mapping_snapshot_rejected(self):
        with pytest.raises(TypeError, match="mapping"):
            _recorder().record(SARAH, "users", "x", new_data=["not", "a", "map"])

    def test_unknown_module_rejected(self):
        recorder = _recorder()
        with pytest.raises(ValueError, match="module"):
            recorder.record(SARAH, "warehouse", "x")
        assert len(recorder) == 0

    def test_ids_unique_and_sequence_monotonic(self):
        recorder = _recorder()
        entries = [recorder.record(ALEX, "users", f"a{i}") for i in range(5)]
        assert len({e.entry_id for e in entries}) == 5
        assert [e.sequence for e in entries] == [1, 2, 3, 4, 5]

    def test_reused_id_rejected(self):
        fixed = uuid.UUID(int=1)
        recorder = AuditRecorder(clock=FixedClock(NOW), id_factory=lambda: fixed)
        recorder.record(ALEX, "users", "a")
        with pytest.raises(ValueError, match="already used"):
            recorder.record(ALEX, "users", "b")
        assert len(recorder) == 1

    def test_sink_receives_entry(self):
        sink = InMemoryAuditSink()
        entry = _recorder(sink).record(ALEX, "roles", "create_role")
        assert sink.entries == (entry,)

    def test_sink_failure_is_fatal_and_ledger_unchanged(self):
        recorder = _recorder(FailingSink())
        with pytest.raises(AuditWriteError, match="disk full") as exc_info:
            recorder.record(ALEX, "settings", "update_global_config")
        assert isinstance(exc_info.value.cause, IOError)
        assert recorder.list() == ()


# ── list / get / diff ────────────────────────────────────────

class TestRead:
    def test_newest_first_and_stable(self):
        clock = FixedClock(NOW)
        recorder = AuditRecorder(clock=clock)
        first = recorder.record(ALEX, "users", "first", new_data={"a": 1})
        clock.advance(60)
        second = recorder.record(SARAH, "products", "second")

        assert recorder.list() == (second, first)
        assert recorder.list() == (second, first)
        assert recorder.list()[1].new_data == {"a": 1}

    def test_filter(self):
        clock = FixedClock(NOW)
        recorder = AuditRecorder(clock=clock)
        recorder.record(ALEX, "settings", "update_global_config")
        clock.advance(3600)
        recorder.record(SARAH, "products", "create_product")
        clock.advance(3600)
        recorder.record(ALEX, "products", "delete_product")

        assert [e.action for e in recorder.list(AuditFilter(actor_id="1"))] == [
            "delete_product",
            "update_global_config",
        ]
        assert len(recorder.list(AuditFilter(module="products"))) == 2
        assert len(recorder.list(AuditFilter(action="create_product"))) == 1
        window = AuditFilter(
            since=NOW + timedelta(minutes=30),
            until=NOW + timedelta(hours=1),
        )
        assert [e.action for e in recorder.list(window)] == ["create_product"]

    def test_get_and_missing(self):
        recorder = _recorder()
        entry = recorder.record(ALEX, "users", "a")
        assert recorder.get(entry.entry_id) is entry
        with pytest.raises(AuditEntryNotFound):
            recorder.get(uuid.uuid4())

    def test_lazy_diff(self):
        recorder = _recorder()
        entry = recorder.record(
            ALEX,
            "settings",
            "update_global_config",
            old_data={"store_name": "Lumina Alpha", "currency": "USD"},
            new_data={"store_name": "Lumina Premium Store", "currency": "USD"},
        )
        entries = recorder.diff(entry.entry_id)
        assert [e.to_dict() for e in entries] == [
            {
                "field": "store_name",
                "old_value": "Lumina Alpha",
                "new_value": "Lumina Premium Store",
                "status": "changed",
            }
        ]

    def test_export_shape(self):
        recorder = _recorder()
        entry = recorder.record(
            ALEX, "products", "delete_product", old_data={"tags": ["a"]}
        )
        exported = recorder.export()
        assert exported == [
            {
                "id": str(entry.entry_id),
                "actor_id": "1",
                "actor_name": "Alex Rivera",
                "role_at_time": "super-admin",
                "module": "products",
                "action": "delete_product",
                "old_data": {"tags": ["a"]},
                "new_data": None,
                "occurred_at": "2025-02-18T09:15:00+00:00",
                "ip_address": "192.168.1.45",
                "user_agent": "Chrome 121.0.0",
            }
        ]
        exported[0]["old_data"]["tags"].append("b")
        assert thaw(entry.old_data) == {"tags": ["a"]}
