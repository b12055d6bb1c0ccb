from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from config import Configuration
from services.filter_model import FilterModel
from services.overpass import ServiceError
from services.query_compiler import InvalidFilterError
from services.search import current_time, run_search

NOON = datetime(2024, 5, 15, 12, 0)

ELEMENTS = [
    {"type": "node", "id": 1, "lat": -36.85, "lon": 174.76,
     "tags": {"shop": "convenience", "name": "Open Dairy", "opening_hours": "24/7"}},
    {"type": "way", "id": 1, "center": {"lat": -36.851, "lon": 174.761},
     "tags": {"shop": "convenience", "name": "Closed Dairy", "opening_hours": "Mo-Su 06:00-08:00"}},
    {"type": "node", "id": 2, "tags": {"shop": "convenience", "name": "Nowhere"}},
    {"type": "node", "id": 3, "lat": -36.852, "lon": 174.762,
     "tags": {"shop": "convenience", "brand": "Night Owl", "opening_hours": "not real hours"}},
]


def _model(open_now: bool = False) -> FilterModel:
    model = FilterModel()
    model.set_center(-36.8485, 174.7633)
    if open_now:
        model.set_amenity_filter("open_now")
    return model


def _client(elements=ELEMENTS) -> MagicMock:
    client = MagicMock()
    client.fetch.return_value = list(elements)
    return client


def test_run_search_normalizes_and_drops_unlocated() -> None:
    client = _client()
    result = run_search(Configuration(), _model(), client=client, now=NOON)
    assert [r.id for r in result.records] == ["node/1", "way/1", "node/3"]
    assert result.total_before_open_filter == 3
    spec = client.fetch.call_args[0][0]
    assert spec is result.query
    assert "[timeout:30]" in spec.overpass_ql


def test_open_now_filters_after_normalization() -> None:
    result = run_search(Configuration(), _model(open_now=True), client=_client(), now=NOON)
    assert [r.display_name for r in result.records] == ["Open Dairy"]
    assert result.total_before_open_filter == 3


def test_not_searchable_makes_no_request() -> None:
    client = _client()
    with pytest.raises(InvalidFilterError):
        run_search(Configuration(), FilterModel(), client=client, now=NOON)
    client.fetch.assert_not_called()


def test_service_error_propagates() -> None:
    client = MagicMock()
    client.fetch.side_effect = ServiceError("upstream 429")
    with pytest.raises(ServiceError):
        run_search(Configuration(), _model(), client=client, now=NOON)


def test_current_time_uses_configured_zone() -> None:
    assert current_time(Configuration(hours_timezone="Pacific/Auckland")).tzinfo is not None
    assert current_time(Configuration(hours_timezone="Not/AZone")).tzinfo is None
    assert current_time(Configuration()).tzinfo is None
