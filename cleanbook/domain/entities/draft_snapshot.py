from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DraftSnapshot:
    """Serializable subset of a draft that survives an authentication detour."""

    step: int
    category: str | None = None
    service_id: int | None = None
    property_size: str | None = None
    crew_size: int | None = None
    duration_hours: float | None = None
    uses_own_materials: bool = False
    window_panel_count: int | None = None
    addon_ids: tuple[int, ...] = ()
    saved_at: float | None = None
    version: int = 1
