from __future__ import annotations

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

from config import Configuration
from models import SearchResult
from services.filter_model import FilterModel
from services.normalizer import filter_open_now, normalize_elements
from services.overpass import OverpassClient
from services.query_compiler import compile_query


def current_time(cfg: Configuration) -> datetime:
    if cfg.hours_timezone:
        try:
            return datetime.now(ZoneInfo(cfg.hours_timezone))
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("unknown HOURS_TIMEZONE={}, using local time", cfg.hours_timezone)
    return datetime.now()


def run_search(
    cfg: Configuration,
    model: FilterModel,
    *,
    client: Optional[OverpassClient] = None,
    now: Optional[datetime] = None,
) -> SearchResult:
    """Compile, fetch and normalize one search.

    Raises InvalidFilterError before any request is made, ServiceError when
    Overpass fails. The open-now toggle is applied here, after normalization.
    """
    spec = compile_query(model, timeout=cfg.overpass_query_timeout)
    logger.debug("overpass query:\n{}", spec.overpass_ql)

    client = client or OverpassClient(cfg)
    elements = client.fetch(spec)

    records = normalize_elements(elements, now=now or current_time(cfg))
    located = [r for r in records if r.coordinate is not None]
    if len(located) != len(records):
        logger.debug("dropped {} elements without coordinates", len(records) - len(located))

    results = filter_open_now(located) if model.wants_open_now() else located

    logger.info(
        "search mode={} categories={} filters={} radius_m={} raw={} normalized={} returned={}",
        model.mode.value,
        len(model.categories),
        ",".join(model.ordered_amenity_filters()) or "-",
        model.radius_m,
        len(elements),
        len(located),
        len(results),
    )
    return SearchResult(query=spec, records=results, total_before_open_filter=len(located))
