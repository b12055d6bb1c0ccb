from __future__ import annotations

import math
from enum import Enum
from typing import Iterable, List, Optional, Set

from models import Coordinate
from services.registry import (
    AMENITY_FILTERS,
    CATEGORY_BY_TAG,
    DEFAULT_CATEGORY,
    MAX_RADIUS_M,
    MIN_RADIUS_M,
    OPEN_NOW,
)


class SearchMode(str, Enum):
    NONE = "none"
    VENDING_ONLY = "vending_only"
    CHAIN_ONLY = "chain_only"


class FilterModel:
    """Mutable search selection owned by one session.

    Categories and the exclusive modes never coexist: picking a mode drops the
    categories, adding a category drops the mode.
    """

    def __init__(self, radius_m: int = 2000, categories: Optional[Iterable[str]] = None) -> None:
        self.center: Optional[Coordinate] = None
        self.radius_m: int = MIN_RADIUS_M
        self.categories: Set[str] = set()
        self.mode: SearchMode = SearchMode.NONE
        self.amenity_filters: Set[str] = set()
        self.set_radius(radius_m)
        self.set_categories([DEFAULT_CATEGORY] if categories is None else categories)

    # --- center / radius -------------------------------------------------

    def set_center(self, lat: float, lon: float) -> None:
        try:
            coord = Coordinate(lat=float(lat), lon=float(lon))
        except (TypeError, ValueError):
            raise ValueError(f"invalid coordinate: {lat!r}, {lon!r}")
        if not coord.is_valid():
            raise ValueError(f"coordinate out of range: {lat}, {lon}")
        self.center = coord

    def clear_center(self) -> None:
        self.center = None

    def set_radius(self, radius_m: int) -> None:
        if isinstance(radius_m, bool):
            raise ValueError("radius must be an integer number of meters")
        if isinstance(radius_m, float):
            if not math.isfinite(radius_m) or not radius_m.is_integer():
                raise ValueError("radius must be an integer number of meters")
            radius_m = int(radius_m)
        if not isinstance(radius_m, int):
            raise ValueError("radius must be an integer number of meters")
        if not MIN_RADIUS_M <= radius_m <= MAX_RADIUS_M:
            raise ValueError(f"radius must be between {MIN_RADIUS_M} and {MAX_RADIUS_M} meters")
        self.radius_m = radius_m

    # --- categories / modes ----------------------------------------------

    @staticmethod
    def _check_category(tag: str) -> None:
        if tag not in CATEGORY_BY_TAG:
            raise ValueError(f"unknown category: {tag}")

    def add_category(self, tag: str) -> None:
        self._check_category(tag)
        self.categories.add(tag)
        self.mode = SearchMode.NONE

    def remove_category(self, tag: str) -> None:
        self.categories.discard(tag)

    def toggle_category(self, tag: str) -> None:
        if tag in self.categories:
            self.remove_category(tag)
        else:
            self.add_category(tag)

    def set_categories(self, tags: Iterable[str]) -> None:
        tags = list(tags)
        for tag in tags:
            self._check_category(tag)
        self.categories = set(tags)
        if self.categories:
            self.mode = SearchMode.NONE

    def set_mode(self, mode: SearchMode | str) -> None:
        try:
            mode = SearchMode(mode)
        except ValueError:
            raise ValueError(f"unknown mode: {mode}")
        if mode is not SearchMode.NONE:
            self.categories = set()
        self.mode = mode

    # --- amenity toggles -------------------------------------------------

    def set_amenity_filter(self, name: str, enabled: bool = True) -> None:
        if name not in AMENITY_FILTERS:
            raise ValueError(f"unknown amenity filter: {name}")
        if enabled:
            self.amenity_filters.add(name)
        else:
            self.amenity_filters.discard(name)

    def toggle_amenity_filter(self, name: str) -> None:
        self.set_amenity_filter(name, name not in self.amenity_filters)

    def set_amenity_filters(self, names: Iterable[str]) -> None:
        names = list(names)
        for name in names:
            if name not in AMENITY_FILTERS:
                raise ValueError(f"unknown amenity filter: {name}")
        self.amenity_filters = set(names)

    # --- predicates ------------------------------------------------------

    def has_selection(self) -> bool:
        return bool(self.categories) != (self.mode is not SearchMode.NONE)

    def is_searchable(self) -> bool:
        return self.center is not None and self.has_selection()

    def wants_open_now(self) -> bool:
        return OPEN_NOW in self.amenity_filters

    def missing_requirement(self) -> Optional[str]:
        if self.center is None:
            return "Need a location first. Enter coordinates manually."
        if not self.has_selection():
            return "Pick at least one type"
        return None

    def ordered_categories(self) -> List[str]:
        return [tag for tag in CATEGORY_BY_TAG if tag in self.categories]

    def ordered_amenity_filters(self) -> List[str]:
        return [name for name in AMENITY_FILTERS if name in self.amenity_filters]
