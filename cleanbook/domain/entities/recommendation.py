from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RecommendationResult:
    recommended_crew_size: int
    recommended_duration_hours: float
    estimated_cost: float  # for the crew/hours actually in use, not authoritative
    efficiency_message: str = ""
