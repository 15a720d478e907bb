"""
Viewer time zones the calendar can be displayed in.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class ViewerTimeZone:
    id: str
    label: str


SUPPORTED_VIEWER_TIME_ZONES: List[ViewerTimeZone] = [
    ViewerTimeZone("America/New_York", "Eastern"),
    ViewerTimeZone("America/Chicago", "Central"),
    ViewerTimeZone("America/Denver", "Mountain"),
    ViewerTimeZone("America/Los_Angeles", "Pacific"),
    ViewerTimeZone("America/Phoenix", "Arizona"),
    ViewerTimeZone("America/Anchorage", "Alaska"),
    ViewerTimeZone("Pacific/Honolulu", "Hawaii"),
]

DEFAULT_VIEWER_TIME_ZONE = "America/New_York"


def is_supported_viewer_time_zone(zone: str) -> bool:
    return any(option.id == zone for option in SUPPORTED_VIEWER_TIME_ZONES)


def label_for_time_zone(zone: str) -> str:
    """Friendly label ('Eastern') for a supported zone, else the zone id."""
    for option in SUPPORTED_VIEWER_TIME_ZONES:
        if option.id == zone:
            return option.label
    return zone


def resolve_viewer_time_zone(requested: str | None, owner_zone: str | None) -> str:
    """
    Pick the zone to display in: an explicit supported choice first, then the
    owner's zone when it is supported, then the default.
    """
    if requested and is_supported_viewer_time_zone(requested):
        return requested
    if owner_zone and is_supported_viewer_time_zone(owner_zone):
        return owner_zone
    return DEFAULT_VIEWER_TIME_ZONE
