from __future__ import annotations

import asyncio
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from loguru import logger
from pydantic import BaseModel, Field

from config import Configuration
from models import AmenityRecord, Coordinate
from services.filter_model import FilterModel, SearchMode
from services.gpx_export import build_gpx, gpx_filename
from services.navigation import navigation_links
from services.overpass import OverpassClient, ServiceError
from services.registry import AMENITY_FILTERS, CATEGORIES, CONVENIENCE_CHAINS, MAX_RADIUS_M, MIN_RADIUS_M
from services.report import build_report, feature_labels
from services.search import run_search
from services.session import SessionManager
from utils import distance_km


load_dotenv(Path(__file__).resolve().parent.parent / ".env")

app = FastAPI(title="Snack Radar")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

session_manager = SessionManager(ttl_sec=Configuration.from_env().session_ttl_sec)


@app.get("/favicon.ico")
def favicon() -> Response:
    # Avoid noisy 404 in logs if browser asks for favicon
    return Response(status_code=204)


class SearchRequest(BaseModel):
    session_id: Optional[str] = Field(None, description="Session ID; keeps filters and the last result set")
    lat: Optional[float] = Field(None, description="Search center latitude")
    lon: Optional[float] = Field(None, description="Search center longitude")
    radius_m: Optional[int] = Field(None, description="Search radius in meters (500-10000)")
    categories: List[str] = Field(default_factory=list, description="Category tags such as shop=convenience")
    mode: str = Field(SearchMode.NONE.value, description="none | vending_only | chain_only")
    amenity_filters: List[str] = Field(default_factory=list, description="Amenity toggles, e.g. has_toilet, open_now")


class RecordPayload(BaseModel):
    id: str
    lat: float
    lon: float
    name: str
    brand: str
    category: str
    tags: Dict[str, Any] = {}
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
    opening_hours: Optional[str] = None
    opening_hours_human: str = ""
    is_open_now: bool = False
    features: List[str] = []
    distance_km: Optional[float] = None
    navigation: Dict[str, str] = {}


class SearchResponse(BaseModel):
    session_id: Optional[str]
    count: int
    total_before_open_filter: int
    center: Dict[str, float]
    radius_m: int
    query: str
    results: List[RecordPayload]


def _to_payload(record: AmenityRecord, center: Optional[Coordinate]) -> RecordPayload:
    coord = record.coordinate
    assert coord is not None
    dist = distance_km(center, coord) if center is not None else math.nan
    return RecordPayload(
        id=record.id,
        lat=coord.lat,
        lon=coord.lon,
        name=record.display_name,
        brand=record.brand,
        category=record.category_label,
        tags=record.raw_tags,
        is_24h=record.is_24h,
        has_toilet=record.has_toilet,
        accepts_card=record.accepts_card,
        has_parking=record.has_parking,
        is_wheelchair_accessible=record.is_wheelchair_accessible,
        is_vending_machine=record.is_vending_machine,
        has_outdoor_seating=record.has_outdoor_seating,
        has_hot_food=record.has_hot_food,
        has_lottery=record.has_lottery,
        sells_cigarettes=record.sells_cigarettes,
        has_atm=record.has_atm,
        has_microwave=record.has_microwave,
        opening_hours=record.opening_hours_raw,
        opening_hours_human=record.opening_hours_human,
        is_open_now=record.is_open_now,
        features=feature_labels(record),
        distance_km=None if math.isnan(dist) else round(dist, 3),
        navigation=navigation_links(coord, record.display_name),
    )


def apply_request(model: FilterModel, req: SearchRequest, cfg: Configuration) -> None:
    """Push request fields through the FilterModel mutators (raises ValueError)."""
    if req.lat is not None and req.lon is not None:
        model.set_center(req.lat, req.lon)
    model.set_radius(req.radius_m if req.radius_m is not None else cfg.default_radius_m)
    model.set_mode(req.mode)
    if model.mode is SearchMode.NONE:
        model.set_categories(req.categories)
    model.set_amenity_filters(req.amenity_filters)


@app.get("/healthz")
def healthz() -> dict:
    cfg = Configuration.from_env()
    logger.info("cfg: {}", cfg.log_summary())
    return {"status": "ok"}


@app.get("/health/overpass")
def health_overpass() -> dict:
    cfg = Configuration.from_env()
    return {"ok": OverpassClient(cfg).ping(), "endpoint": cfg.interpreter_url}


@app.get("/registry")
def registry() -> dict:
    return {
        "categories": [{"label": c.label, "tag": c.tag} for c in CATEGORIES],
        "modes": [m.value for m in SearchMode],
        "chains": list(CONVENIENCE_CHAINS),
        "amenity_filters": list(AMENITY_FILTERS),
        "radius_m": {"min": MIN_RADIUS_M, "max": MAX_RADIUS_M, "step": 500},
    }


@app.post("/search", response_model=SearchResponse)
async def search(req: SearchRequest) -> SearchResponse:
    cfg = Configuration.from_env()
    session = session_manager.get_or_create(req.session_id or "")
    model = session.filters

    try:
        apply_request(model, req, cfg)
        result = await asyncio.to_thread(run_search, cfg, model)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ServiceError as exc:
        logger.warning("overpass failure: {}", exc.detail)
        raise HTTPException(status_code=502, detail=exc.user_message)
    except Exception as exc:
        logger.exception("search failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")

    center = result.query.center
    if req.session_id:
        session_manager.store_results(req.session_id, result.records, center)

    return SearchResponse(
        session_id=req.session_id,
        count=len(result.records),
        total_before_open_filter=result.total_before_open_filter,
        center={"lat": center.lat, "lon": center.lon},
        radius_m=result.query.radius_m,
        query=result.query.overpass_ql,
        results=[_to_payload(r, center) for r in result.records],
    )


def _session_with_results(session_id: str):
    session = session_manager.get(session_id)
    if session is None or session.searched_at is None:
        raise HTTPException(status_code=404, detail="no search results for this session")
    return session


@app.get("/sessions/{session_id}/export.gpx")
def export_gpx(session_id: str) -> Response:
    session = _session_with_results(session_id)
    body = build_gpx(session.results, session.center)
    return Response(
        content=body,
        media_type="application/gpx+xml",
        headers={"Content-Disposition": f'attachment; filename="{gpx_filename()}"'},
    )


@app.get("/sessions/{session_id}/report", response_class=PlainTextResponse)
def export_report(session_id: str) -> str:
    session = _session_with_results(session_id)
    return build_report(session.results, session.center, session.filters.radius_m)


@app.delete("/sessions/{session_id}")
def reset_session(session_id: str) -> dict:
    session_manager.reset(session_id)
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8010, reload=True)
