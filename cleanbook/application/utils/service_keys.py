from __future__ import annotations


def service_type_for(service_name: str) -> str:
    """Map a catalog service name to a recommendation service type."""
    name = (service_name or "").lower()
    if "regular" in name:
        return "regular"
    if "deep" in name and "villa" not in name and "apartment" not in name:
        return "deep"
    if "move" in name:
        return "move"
    if "office" in name:
        return "office"
    if "construction" in name:
        return "post_construction"
    if "kitchen" in name:
        return "kitchen"
    if "bathroom" in name:
        return "bathroom"
    return "regular"
