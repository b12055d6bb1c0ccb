from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from loguru import logger

from models import AmenityRecord, Coordinate
from services.opening_hours import evaluate_opening_hours
from services.registry import AMENITY_FEATURES, ANY_VALUE


PLACEHOLDER_NAME = "Snack Spot"

HoursEvaluator = Callable[[str, datetime], Tuple[bool, str]]


def _tags_of(raw: Mapping[str, Any]) -> Dict[str, Any]:
    tags = raw.get("tags")
    if not isinstance(tags, Mapping):
        return {}
    return dict(tags)


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def resolve_coordinate(raw: Mapping[str, Any]) -> Optional[Coordinate]:
    """Prefer the computed center of ways/relations over direct node coordinates."""
    center = raw.get("center")
    if isinstance(center, Mapping):
        lat, lon = _as_float(center.get("lat")), _as_float(center.get("lon"))
        if lat is not None and lon is not None:
            return Coordinate(lat=lat, lon=lon)
    lat, lon = _as_float(raw.get("lat")), _as_float(raw.get("lon"))
    if lat is not None and lon is not None:
        return Coordinate(lat=lat, lon=lon)
    return None


def _matches(tags: Mapping[str, Any], key: str, value: str) -> bool:
    if value == ANY_VALUE:
        return bool(tags.get(key))
    return tags.get(key) == value


def derive_features(tags: Mapping[str, Any]) -> Dict[str, bool]:
    return {
        feature.field: any(_matches(tags, key, value) for key, value in feature.conditions)
        for feature in AMENITY_FEATURES
    }


def _first(*values: Any) -> str:
    for value in values:
        if value:
            return str(value)
    return ""


def resolve_display_name(tags: Mapping[str, Any]) -> str:
    vending = tags.get("vending")
    return _first(
        tags.get("name"),
        tags.get("brand"),
        tags.get("operator"),
        f"Vending: {vending}" if vending else None,
        PLACEHOLDER_NAME,
    )


def resolve_brand(tags: Mapping[str, Any]) -> str:
    return _first(tags.get("brand"), tags.get("brand:en"), tags.get("name"))


def _record_id(raw: Mapping[str, Any]) -> str:
    kind = raw.get("type") or "element"
    return f"{kind}/{raw.get('id')}"


def normalize_record(
    raw: Mapping[str, Any],
    *,
    now: Optional[datetime] = None,
    hours_evaluator: HoursEvaluator = evaluate_opening_hours,
) -> AmenityRecord:
    """Turn one Overpass element into an AmenityRecord.

    Missing or malformed fields fall back to defaults; a bad ``opening_hours``
    value leaves the record closed with no human-readable hours.
    """
    if not isinstance(raw, Mapping):
        raw = {}
    tags = _tags_of(raw)

    hours_raw = tags.get("opening_hours")
    hours_raw = str(hours_raw) if hours_raw else None
    is_open_now = False
    hours_human = ""
    if hours_raw:
        try:
            is_open_now, hours_human = hours_evaluator(hours_raw, now or datetime.now())
            is_open_now = bool(is_open_now)
            hours_human = str(hours_human or "")
        except Exception as exc:
            logger.debug("opening_hours unreadable id={} value={!r}: {}", _record_id(raw), hours_raw, exc)
            is_open_now, hours_human = False, ""

    return AmenityRecord(
        id=_record_id(raw),
        coordinate=resolve_coordinate(raw),
        display_name=resolve_display_name(tags),
        raw_tags=tags,
        brand=resolve_brand(tags),
        opening_hours_raw=hours_raw,
        is_open_now=is_open_now,
        opening_hours_human=hours_human,
        **derive_features(tags),
    )


def normalize_elements(
    elements: Iterable[Any],
    *,
    now: Optional[datetime] = None,
    hours_evaluator: HoursEvaluator = evaluate_opening_hours,
) -> List[AmenityRecord]:
    now = now or datetime.now()
    records: list[AmenityRecord] = []
    for raw in elements:
        try:
            records.append(normalize_record(raw, now=now, hours_evaluator=hours_evaluator))
        except Exception as exc:
            logger.warning("skipping element that failed to normalize: {}", exc)
    return records


def filter_open_now(records: Iterable[AmenityRecord]) -> List[AmenityRecord]:
    return [r for r in records if r.is_open_now]
