"""
Tests for device-local draft snapshot persistence.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from cleanbook.application.use_cases.guest_bridge import GuestDraftBridge
from cleanbook.domain.entities.booking_draft import BookingDraft, Category, PropertySize, WizardStep
from cleanbook.infrastructure.store.json_draft_store import JsonDraftStore
from cleanbook.infrastructure.store.memory_draft_store import MemoryDraftStore


def test_json_store_persistence():
    """Test that JSON store persists and retrieves a snapshot correctly."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonDraftStore(data_dir=tmpdir, namespace="pending_booking")
        store.save({"version": 1, "step": 3, "service_id": 7, "addon_ids": [1, 2]})

        reopened = JsonDraftStore(data_dir=tmpdir, namespace="pending_booking")
        assert reopened.load() == {"version": 1, "step": 3, "service_id": 7, "addon_ids": [1, 2]}
        assert not list(Path(tmpdir).glob("*.tmp"))


def test_namespaces_are_separate():
    with tempfile.TemporaryDirectory() as tmpdir:
        drafts = JsonDraftStore(data_dir=tmpdir, namespace="pending_booking")
        reorders = JsonDraftStore(data_dir=tmpdir, namespace="order_again")
        drafts.save({"step": 2})

        assert reorders.load() is None
        reorders.save({"step": 3})
        drafts.clear()
        assert drafts.load() is None
        assert reorders.load() == {"step": 3}


def test_clear_when_nothing_stored():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonDraftStore(data_dir=tmpdir)
        store.clear()
        assert store.load() is None


def test_corrupt_file_reads_as_absent():
    """A half-written or hand-edited file must not break the wizard."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonDraftStore(data_dir=tmpdir, namespace="pending_booking")
        (Path(tmpdir) / "pending_booking.json").write_text("{not json", encoding="utf-8")
        assert store.load() is None

        (Path(tmpdir) / "pending_booking.json").write_text("[1, 2, 3]", encoding="utf-8")
        assert store.load() is None


def test_undecodable_file_reads_as_absent():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonDraftStore(data_dir=tmpdir, namespace="pending_booking")
        (Path(tmpdir) / "pending_booking.json").write_bytes(b'{"step": 3, "category": "\xff\xfe"}')
        assert store.load() is None


def test_bridge_round_trip_through_json_store(catalog, today):
    with tempfile.TemporaryDirectory() as tmpdir:
        bridge = GuestDraftBridge(JsonDraftStore(data_dir=tmpdir))
        draft = BookingDraft(
            category=Category.DEEP,
            service=catalog.service(8),
            property_size=PropertySize.SMALL,
            crew_size=2,
            duration_hours=4.5,
            uses_own_materials=True,
        )
        bridge.persist_draft(draft, WizardStep.SCHEDULING)

        resumed, step = GuestDraftBridge(JsonDraftStore(data_dir=tmpdir)).try_resume_draft(catalog, today)
        assert resumed == draft
        assert step is WizardStep.SCHEDULING
        assert not (Path(tmpdir) / "pending_booking.json").exists()


def test_memory_store_returns_copies():
    store = MemoryDraftStore()
    payload = {"step": 2, "addon_ids": [1]}
    store.save(payload)
    payload["addon_ids"].append(2)
    loaded = store.load()
    assert loaded == {"step": 2, "addon_ids": [1]}
    loaded["step"] = 4
    assert store.load()["step"] == 2
