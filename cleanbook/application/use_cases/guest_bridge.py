from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import date
from typing import Any, Callable

from cleanbook.application.exceptions import ResumeDeserializationFailed
from cleanbook.application.ports.local_draft_store import LocalDraftStorePort
from cleanbook.application.use_cases.draft_machine import SELECTABLE_CREW_SIZES, first_invalid_step
from cleanbook.application.use_cases.pricing import is_hourly, requires_panel_count
from cleanbook.domain.entities.booking_draft import BookingDraft, Category, PropertySize, WizardStep
from cleanbook.domain.entities.catalog import CatalogSnapshot
from cleanbook.domain.entities.draft_snapshot import DraftSnapshot
from cleanbook.domain.entities.order import OrderRecord


SNAPSHOT_VERSION = 1
MAX_RESUME_STEP = WizardStep.SCHEDULING


class GuestDraftBridge:
    """
    One-shot hand-off of a draft across an authentication detour.

    ``persist_draft`` writes a snapshot; ``try_resume_draft`` consumes it
    exactly once. The stored snapshot is cleared on every resume attempt,
    whatever the outcome, so a snapshot can never be replayed.
    """

    def __init__(
        self,
        store: LocalDraftStorePort,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def has_pending(self) -> bool:
        return self._store.load() is not None

    def persist_draft(self, draft: BookingDraft, at_step: WizardStep) -> DraftSnapshot:
        snapshot = snapshot_from_draft(draft, at_step, saved_at=self._clock())
        self.persist_snapshot(snapshot)
        return snapshot

    def seed_reorder(self, order: OrderRecord) -> DraftSnapshot:
        """Store a previous order's configuration for the next authenticated open."""
        snapshot = snapshot_from_order(order, saved_at=self._clock())
        self.persist_snapshot(snapshot)
        return snapshot

    def persist_snapshot(self, snapshot: DraftSnapshot) -> None:
        self._store.save(serialize_snapshot(snapshot))
        self._logger.info(
            "Draft snapshot persisted",
            extra={"step": snapshot.step, "service_id": snapshot.service_id, "category": snapshot.category},
        )

    def discard(self) -> None:
        self._store.clear()
        self._logger.info("Draft snapshot discarded", extra={"reason": "superseded"})

    def try_resume_draft(
        self,
        catalog: CatalogSnapshot,
        today: date,
    ) -> tuple[BookingDraft, WizardStep] | None:
        """
        Rebuild a draft from the stored snapshot against a loaded catalog.

        References that no longer resolve are dropped rather than failing.
        The resumed step is at most SCHEDULING, and lower if dropped fields
        invalidate an earlier step.
        """
        try:
            raw = self._store.load()
            if raw is None:
                return None
            snapshot = deserialize_snapshot(raw)
        except ResumeDeserializationFailed as e:
            self._logger.warning("Draft snapshot dropped", extra={"reason": "corrupt", "error": str(e)})
            return None
        finally:
            self._store.clear()

        draft = resolve_snapshot(snapshot, catalog)
        step = WizardStep(max(WizardStep.CATEGORY_SELECTION, min(snapshot.step, MAX_RESUME_STEP)))
        invalid = first_invalid_step(draft, step, today)
        if invalid is not None:
            step = invalid

        self._logger.info(
            "Draft snapshot resumed",
            extra={"step": int(step), "service_id": draft.service.id if draft.service else None},
        )
        return draft, step


def snapshot_from_draft(draft: BookingDraft, at_step: WizardStep, saved_at: float | None = None) -> DraftSnapshot:
    return DraftSnapshot(
        step=int(at_step),
        category=draft.category.value if draft.category else None,
        service_id=draft.service.id if draft.service else None,
        property_size=draft.property_size.value if draft.property_size else None,
        crew_size=draft.crew_size,
        duration_hours=draft.duration_hours,
        uses_own_materials=draft.uses_own_materials,
        window_panel_count=draft.window_panel_count,
        addon_ids=draft.addon_ids,
        saved_at=saved_at,
        version=SNAPSHOT_VERSION,
    )


def snapshot_from_order(order: OrderRecord, saved_at: float | None = None) -> DraftSnapshot:
    """Seed for "order again": the previous configuration, resumed at scheduling."""
    return DraftSnapshot(
        step=int(WizardStep.SCHEDULING),
        category=order.category.value if order.category else None,
        service_id=order.service_id,
        property_size=order.property_size.value if order.property_size else None,
        crew_size=order.crew_size,
        duration_hours=order.duration_hours,
        uses_own_materials=order.uses_own_materials,
        window_panel_count=order.window_panel_count,
        addon_ids=tuple(line.addon_id for line in order.addons),
        saved_at=saved_at,
        version=SNAPSHOT_VERSION,
    )


def serialize_snapshot(snapshot: DraftSnapshot) -> dict[str, Any]:
    return {
        "version": snapshot.version,
        "step": snapshot.step,
        "category": snapshot.category,
        "service_id": snapshot.service_id,
        "property_size": snapshot.property_size,
        "crew_size": snapshot.crew_size,
        "duration_hours": snapshot.duration_hours,
        "uses_own_materials": snapshot.uses_own_materials,
        "window_panel_count": snapshot.window_panel_count,
        "addon_ids": list(snapshot.addon_ids),
        "saved_at": snapshot.saved_at,
    }


def deserialize_snapshot(data: Any) -> DraftSnapshot:
    if not isinstance(data, dict):
        raise ResumeDeserializationFailed("snapshot is not an object")
    if data.get("version", SNAPSHOT_VERSION) != SNAPSHOT_VERSION:
        raise ResumeDeserializationFailed(f"unsupported snapshot version {data.get('version')!r}")

    try:
        step = int(data["step"])
        addon_ids = tuple(int(a) for a in data.get("addon_ids") or [])
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        raise ResumeDeserializationFailed(f"invalid snapshot: {e}") from e

    return DraftSnapshot(
        step=step,
        category=_optional(data.get("category"), str),
        service_id=_optional(data.get("service_id"), int),
        property_size=_optional(data.get("property_size"), str),
        crew_size=_optional(data.get("crew_size"), int),
        duration_hours=_optional(data.get("duration_hours"), float),
        uses_own_materials=bool(data.get("uses_own_materials", False)),
        window_panel_count=_optional(data.get("window_panel_count"), int),
        addon_ids=addon_ids,
        saved_at=_optional(data.get("saved_at"), float),
    )


def resolve_snapshot(snapshot: DraftSnapshot, catalog: CatalogSnapshot) -> BookingDraft:
    """Re-resolve ids against the catalog, dropping whatever no longer fits."""
    category = _enum_or_none(Category, snapshot.category)
    service = catalog.service(snapshot.service_id) if category else None
    if service is not None and (not service.is_active or service.category != category.value):
        service = None

    draft = BookingDraft(
        category=category,
        service=service,
        uses_own_materials=snapshot.uses_own_materials,
        selected_addons=tuple(
            addon for addon in (catalog.addon(a) for a in dict.fromkeys(snapshot.addon_ids)) if addon is not None
        ),
    )

    if is_hourly(service):
        size = _enum_or_none(PropertySize, snapshot.property_size)
        crew = snapshot.crew_size if size and snapshot.crew_size in SELECTABLE_CREW_SIZES else None
        hours = snapshot.duration_hours if crew and _positive_half_hours(snapshot.duration_hours) else None
        draft = replace(draft, property_size=size, crew_size=crew, duration_hours=hours)
    elif requires_panel_count(service):
        count = snapshot.window_panel_count
        draft = replace(draft, window_panel_count=count if count and count > 0 else None)

    return draft


def _optional(value: Any, cast: Callable[[Any], Any]) -> Any:
    if value is None:
        return None
    try:
        return cast(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _enum_or_none(enum_cls, value: str | None):
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _positive_half_hours(value: float | None) -> bool:
    return value is not None and value > 0 and float(value * 2).is_integer()
