"""Compile a FilterModel into an Overpass QL query.

Filters written one after another in Overpass QL are ANDed; disjunctions go
through an ``(if: ...)`` evaluator so the whole selection stays a single filter
chain that can be attached to node, way and relation statements alike.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from models import QuerySpec
from services.filter_model import FilterModel, SearchMode
from services.registry import (
    AMENITY_FEATURES,
    ANY_VALUE,
    CATEGORY_BY_TAG,
    CHAIN_BASE_TAG,
    CHAIN_NAME_KEYS,
    CONVENIENCE_CHAINS,
)


GEOMETRY_KINDS = ("node", "way", "relation")
DEFAULT_QUERY_TIMEOUT = 30


class InvalidFilterError(ValueError):
    pass


_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_literal(value: str) -> str:
    """Escape a value for use inside a double-quoted Overpass string."""
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def quote(value: str) -> str:
    return f'"{escape_literal(value)}"'


def tag_filter(key: str, value: str) -> str:
    if value == ANY_VALUE:
        return f"[{quote(key)}]"
    return f"[{quote(key)}={quote(value)}]"


def tag_test(key: str, value: str) -> str:
    """Evaluator term: true when the tag matches."""
    if value == ANY_VALUE:
        return f"is_tag({quote(key)})"
    return f"t[{quote(key)}]=={quote(value)}"


def any_of(conditions: Sequence[Tuple[str, str]]) -> str:
    """One filter that passes when any (key, value) condition holds."""
    if len(conditions) == 1:
        key, value = conditions[0]
        return tag_filter(key, value)
    return "(if: " + " || ".join(tag_test(k, v) for k, v in conditions) + ")"


def _chain_clause() -> str:
    groups = []
    for name in CONVENIENCE_CHAINS:
        terms = " || ".join(tag_test(key, name) for key in CHAIN_NAME_KEYS)
        groups.append(f"({terms})")
    return tag_filter(*CHAIN_BASE_TAG) + "(if: " + " || ".join(groups) + ")"


def base_expression(model: FilterModel) -> str:
    if model.mode is SearchMode.VENDING_ONLY:
        return tag_filter("vending", ANY_VALUE)
    if model.mode is SearchMode.CHAIN_ONLY:
        return _chain_clause()
    conditions = [(CATEGORY_BY_TAG[tag].key, CATEGORY_BY_TAG[tag].value) for tag in model.ordered_categories()]
    return any_of(conditions)


def amenity_clauses(model: FilterModel) -> List[str]:
    active = set(model.amenity_filters)
    return [any_of(f.conditions) for f in AMENITY_FEATURES if f.filter_name and f.filter_name in active]


def build_overpass_ql(tag_expression: str, lat: float, lon: float, radius_m: int, timeout: int) -> str:
    around = f"(around:{radius_m},{lat},{lon})"
    lines = [f"[out:json][timeout:{timeout}];", "("]
    lines.extend(f"  {kind}{tag_expression}{around};" for kind in GEOMETRY_KINDS)
    lines += [");", "out center;"]
    return "\n".join(lines)


def compile_query(model: FilterModel, *, timeout: int = DEFAULT_QUERY_TIMEOUT) -> QuerySpec:
    if not model.is_searchable():
        raise InvalidFilterError(model.missing_requirement() or "filter selection is not searchable")

    center = model.center
    assert center is not None
    expression = base_expression(model) + "".join(amenity_clauses(model))
    return QuerySpec(
        tag_expression=expression,
        center=center,
        radius_m=model.radius_m,
        overpass_ql=build_overpass_ql(expression, center.lat, center.lon, model.radius_m, timeout),
    )
