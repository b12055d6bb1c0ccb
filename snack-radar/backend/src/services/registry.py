from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


# Tag value meaning "key present with any value"
ANY_VALUE = "*"


@dataclass(frozen=True)
class Category:
    label: str
    tag: str  # "key=value", value may be ANY_VALUE

    @property
    def key(self) -> str:
        return self.tag.split("=", 1)[0]

    @property
    def value(self) -> str:
        return self.tag.split("=", 1)[1]


CATEGORIES: List[Category] = [
    Category("Convenience", "shop=convenience"),
    Category("Supermarket", "shop=supermarket"),
    Category("Candy / Sweets", "shop=confectionery"),
    Category("Bakery", "shop=bakery"),
    Category("Ice Cream", "amenity=ice_cream"),
    Category("Bubble Tea", "shop=bubble_tea"),
    Category("Beverage", "shop=beverages"),
    Category("Vending (any)", "vending=*"),
]

CATEGORY_BY_TAG: Dict[str, Category] = {c.tag: c for c in CATEGORIES}

DEFAULT_CATEGORY = "shop=convenience"

CONVENIENCE_CHAINS: List[str] = [
    "7-Eleven",
    "Seven Eleven",
    "セブン-イレブン",
    "FamilyMart",
    "ファミリーマート",
    "Lawson",
    "ローソン",
    "Ministop",
    "ミニストップ",
    "Daily Yamazaki",
    "デイリーヤマザキ",
    "NewDays",
    "New Days",
    "NewDay",
    "Popura",
    "ポプラ",
    "Seicomart",
    "セイコーマート",
]

# Each chain name is matched against all of these keys
CHAIN_NAME_KEYS: Tuple[str, ...] = ("brand", "name", "brand:en", "name:en", "brand:ja", "name:ja")

# Chain mode only considers shops carrying this tag
CHAIN_BASE_TAG: Tuple[str, str] = ("shop", "convenience")


@dataclass(frozen=True)
class AmenityFeature:
    field: str  # AmenityRecord attribute
    filter_name: Optional[str]  # user toggle, None when not filterable
    label: str
    conditions: Tuple[Tuple[str, str], ...]  # any-of (key, value)


AMENITY_FEATURES: List[AmenityFeature] = [
    AmenityFeature("is_24h", "is_24h", "24/7", (("opening_hours", "24/7"),)),
    AmenityFeature("has_toilet", "has_toilet", "Toilet", (("toilets", "yes"),)),
    AmenityFeature("accepts_card", "accepts_card", "Credit cards", (("payment:credit_cards", "yes"),)),
    AmenityFeature("has_parking", "has_parking", "Parking", (("parking", "yes"),)),
    AmenityFeature("is_wheelchair_accessible", "wheelchair", "Wheelchair", (("wheelchair", "yes"),)),
    AmenityFeature("is_vending_machine", None, "Vending machine", (("vending", ANY_VALUE),)),
    AmenityFeature("has_outdoor_seating", "outdoor_seating", "Outdoor seating", (("outdoor_seating", "yes"),)),
    AmenityFeature("has_hot_food", "hot_food", "Hot food", (("takeaway", "yes"),)),
    AmenityFeature("has_lottery", "lottery", "Lottery", (("lottery", "yes"), ("shop", "lottery"))),
    AmenityFeature(
        "sells_cigarettes",
        "cigarettes",
        "Cigarettes",
        (("tobacco", "yes"), ("shop", "tobacco"), ("vending", "cigarettes")),
    ),
    AmenityFeature("has_atm", "atm", "ATM", (("atm", "yes"),)),
    AmenityFeature("has_microwave", "microwave", "Microwave", (("microwave", "yes"),)),
]

OPEN_NOW = "open_now"

# Declaration order of user toggles; open_now sits after the tag-backed ones
AMENITY_FILTERS: List[str] = [f.filter_name for f in AMENITY_FEATURES if f.filter_name] + [OPEN_NOW]

MIN_RADIUS_M = 500
MAX_RADIUS_M = 10000
