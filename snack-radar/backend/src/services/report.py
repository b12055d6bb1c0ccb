from __future__ import annotations

from typing import List, Optional

from models import AmenityRecord, Coordinate
from services.registry import AMENITY_FEATURES
from utils import distance_km


# Badges shown in the list view, in display order
BADGES = {
    "is_24h": "24/7",
    "has_toilet": "Toilet",
    "accepts_card": "Cards",
    "has_atm": "ATM",
    "sells_cigarettes": "Cigarettes",
    "has_microwave": "Microwave",
    "has_outdoor_seating": "Outdoor seating",
    "has_lottery": "Lottery",
}


def _badges(record: AmenityRecord) -> List[str]:
    return [label for field, label in BADGES.items() if getattr(record, field, False)]


def build_report(records: List[AmenityRecord], center: Optional[Coordinate], radius_m: Optional[int] = None) -> str:
    header = [
        "## Snack Radar Results",
        "",
        f"- Found: {len(records)} snack spots",
    ]
    if center is not None:
        header.append(f"- Center: {center.lat:.5f}, {center.lon:.5f}")
    if radius_m:
        header.append(f"- Search radius: {radius_m / 1000:.1f} km")
    header += ["", "> Data from OpenStreetMap via the Overpass API. Not all shops are tagged.", ""]

    lines = header
    if not records:
        lines.append("No results. Try a larger radius or fewer filters.")
        return "\n".join(lines)

    for idx, r in enumerate(records, start=1):
        status = "Open now" if r.is_open_now else "Closed"
        info = r.category_label
        if center is not None and r.coordinate is not None:
            info += f" • {distance_km(center, r.coordinate):.1f} km"
        badges = _badges(r)
        lines += [
            f"#### {idx}. {r.display_name} ({status})",
            f"- Type: {info}",
            (f"- Brand: {r.brand}" if r.brand and r.brand != r.display_name else "- Brand: not tagged"),
            (f"- Hours: {r.opening_hours_human}" if r.opening_hours_human else "- Hours: unknown"),
            ("- Features: " + ", ".join(badges)) if badges else "- Features: none tagged",
            "",
        ]

    return "\n".join(lines)


def feature_labels(record: AmenityRecord) -> List[str]:
    """Labels of every derived feature the record has."""
    return [f.label for f in AMENITY_FEATURES if getattr(record, f.field, False)]
