from __future__ import annotations

import re
from datetime import date
from typing import Iterable, Optional
from xml.etree import ElementTree as ET

from models import AmenityRecord, Coordinate
from services.normalizer import PLACEHOLDER_NAME


GPX_NS = "http://www.topografix.com/GPX/1/1"
CREATOR = "Snack Radar"


def _clean_name(name: str) -> str:
    return re.sub(r"[<>&]", "", name or PLACEHOLDER_NAME)


def _waypoint(parent: ET.Element, coord: Coordinate, name: str, kind: str, desc: Optional[str] = None) -> None:
    wpt = ET.SubElement(parent, "wpt", lat=repr(coord.lat), lon=repr(coord.lon))
    ET.SubElement(wpt, "name").text = name
    if desc is not None:
        ET.SubElement(wpt, "desc").text = desc
    ET.SubElement(wpt, "type").text = kind


def build_gpx(records: Iterable[AmenityRecord], center: Optional[Coordinate] = None) -> str:
    """Serialize results as GPX 1.1 waypoints, plus a start point at ``center``."""
    root = ET.Element("gpx", version="1.1", creator=CREATOR, xmlns=GPX_NS)
    metadata = ET.SubElement(root, "metadata")
    ET.SubElement(metadata, "name").text = f"{CREATOR} Export"

    for record in records:
        if record.coordinate is None:
            continue
        desc = f"{record.raw_tags.get('shop') or ''} {'24/7' if record.is_24h else ''}".strip()
        _waypoint(root, record.coordinate, _clean_name(record.display_name), "snack", desc)

    if center is not None:
        _waypoint(root, center, "You are here", "start")

    ET.indent(root)
    body = ET.tostring(root, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


def gpx_filename(today: Optional[date] = None) -> str:
    return f"snack-radar-{(today or date.today()).isoformat()}.gpx"
