"""Data models for the snack radar backend."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float

    def is_valid(self) -> bool:
        if not (math.isfinite(self.lat) and math.isfinite(self.lon)):
            return False
        return -90.0 <= self.lat <= 90.0 and -180.0 <= self.lon <= 180.0


@dataclass(frozen=True)
class QuerySpec:
    tag_expression: str
    center: Coordinate
    radius_m: int
    overpass_ql: str


@dataclass(frozen=True)
class AmenityRecord:
    id: str
    coordinate: Optional[Coordinate]
    display_name: str
    raw_tags: Dict[str, Any] = field(default_factory=dict)
    is_24h: bool = False
    has_toilet: bool = False
    accepts_card: bool = False
    has_parking: bool = False
    is_wheelchair_accessible: bool = False
    is_vending_machine: bool = False
    has_outdoor_seating: bool = False
    has_hot_food: bool = False
    has_lottery: bool = False
    sells_cigarettes: bool = False
    has_atm: bool = False
    has_microwave: bool = False
    brand: str = ""
    opening_hours_raw: Optional[str] = None
    is_open_now: bool = False
    opening_hours_human: str = ""

    @property
    def category_label(self) -> str:
        return str(self.raw_tags.get("shop") or self.raw_tags.get("amenity") or "Spot")


@dataclass
class SearchResult:
    query: QuerySpec
    records: List[AmenityRecord] = field(default_factory=list)
    total_before_open_filter: int = 0
