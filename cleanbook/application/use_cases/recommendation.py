"""
Staffing and duration recommendation.

Pure functions: given a service type, a property size and (optionally) the
crew the customer picked, suggest how many cleaners to send, how long they
need, and what that costs at the hourly rate. Unknown service types fall
back to the ``regular`` rows; unknown sizes fall back to ``small``.
"""

from __future__ import annotations

import math

from cleanbook.domain.entities.recommendation import RecommendationResult


DEFAULT_SERVICE_TYPE = "regular"
DEFAULT_PROPERTY_SIZE = "small"

SERVICE_COEFFICIENTS: dict[str, float] = {
    "regular": 1.0,
    "deep": 1.3,
    "move": 1.5,
    "office": 1.0,
    "post_construction": 1.7,
    "kitchen": 1.2,
    "bathroom": 1.1,
}

SIZE_MULTIPLIERS: dict[str, float] = {
    "small": 1.2,
    "medium": 1.6,
    "large": 2.4,
    "villa": 3.2,
}

# Hours for a single cleaner.
BASE_HOURS: dict[str, dict[str, float]] = {
    "regular": {"small": 4, "medium": 6, "large": 8, "villa": 12},
    "deep": {"small": 5, "medium": 7, "large": 10, "villa": 15},
    "move": {"small": 6, "medium": 8, "large": 12, "villa": 18},
    "office": {"small": 4, "medium": 6, "large": 8, "villa": 12},
    "post_construction": {"small": 7, "medium": 9, "large": 14, "villa": 20},
    "kitchen": {"small": 3, "medium": 3.5, "large": 4, "villa": 5},
    "bathroom": {"small": 2.5, "medium": 3, "large": 3.5, "villa": 4},
}

TEAM_EFFICIENCY: dict[int, float] = {1: 1.0, 2: 0.75, 3: 0.55, 4: 0.45}

# Per cleaner per hour: (materials included, customer supplies materials).
HOURLY_RATES: dict[str, tuple[float, float]] = {
    "regular": (45, 35),
    "deep": (55, 45),
    "move": (55, 45),
    "office": (45, 35),
    "post_construction": (65, 55),
    "kitchen": (55, 45),
    "bathroom": (50, 40),
}

QUALITY_BUFFER_HOURS = 0.5
MIN_DURATION_HOURS = 2.5
MAX_DURATION_HOURS = 7.0

EFFICIENCY_MESSAGES: dict[int, str] = {
    2: "Optimal team size for quality and efficiency",
    3: "Enhanced team for faster completion and superior results",
    4: "Maximum efficiency team for comprehensive cleaning",
}


def service_coefficient(service_type: str) -> float:
    return SERVICE_COEFFICIENTS.get(service_type, SERVICE_COEFFICIENTS[DEFAULT_SERVICE_TYPE])


def size_multiplier(property_size: str) -> float:
    return SIZE_MULTIPLIERS.get(property_size, SIZE_MULTIPLIERS[DEFAULT_PROPERTY_SIZE])


def base_hours(service_type: str, property_size: str) -> float:
    row = BASE_HOURS.get(service_type, BASE_HOURS[DEFAULT_SERVICE_TYPE])
    if property_size in row:
        return row[property_size]
    return row[DEFAULT_PROPERTY_SIZE]


def team_efficiency(crew_size: int) -> float:
    return TEAM_EFFICIENCY.get(crew_size, 1.0)


def hourly_rate(service_type: str, uses_own_materials: bool) -> float:
    included, own = HOURLY_RATES.get(service_type, HOURLY_RATES[DEFAULT_SERVICE_TYPE])
    return own if uses_own_materials else included


def recommend_crew_size(service_type: str, property_size: str) -> int:
    """Suggest 2, 3 or 4 cleaners. A single cleaner is never suggested."""
    complexity = service_coefficient(service_type) * size_multiplier(property_size)
    if complexity <= 1.8:
        return 2
    if complexity <= 2.8:
        return 3
    return 4


def recommend_duration(service_type: str, property_size: str, crew_size: int) -> float:
    hours = base_hours(service_type, property_size) * team_efficiency(crew_size)
    hours += QUALITY_BUFFER_HOURS
    # Round up to the next half hour; the inner round() drops float noise
    # such as 6.000000000000001 so it does not cost an extra half hour.
    hours = math.ceil(round(hours * 2, 9)) / 2
    return max(MIN_DURATION_HOURS, min(MAX_DURATION_HOURS, hours))


def calculate_hourly_cost(
    service_type: str,
    crew_size: int,
    hours: float,
    uses_own_materials: bool,
) -> float:
    return crew_size * hours * hourly_rate(service_type, uses_own_materials)


def get_recommendation(
    service_type: str,
    property_size: str,
    crew_size: int | None = None,
    hours: float | None = None,
    uses_own_materials: bool = False,
) -> RecommendationResult:
    """
    Recommend crew and duration, and estimate the cost for the crew/hours in use.

    The duration recommendation follows the customer's crew choice when one
    is made, otherwise the recommended crew.
    """
    recommended_crew = recommend_crew_size(service_type, property_size)
    crew_in_use = crew_size or recommended_crew
    recommended_hours = recommend_duration(service_type, property_size, crew_in_use)
    hours_in_use = hours or recommended_hours

    return RecommendationResult(
        recommended_crew_size=recommended_crew,
        recommended_duration_hours=recommended_hours,
        estimated_cost=calculate_hourly_cost(service_type, crew_in_use, hours_in_use, uses_own_materials),
        efficiency_message=EFFICIENCY_MESSAGES.get(crew_in_use, ""),
    )
