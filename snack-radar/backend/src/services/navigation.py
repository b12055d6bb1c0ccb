from __future__ import annotations

import urllib.parse
from typing import Dict

from models import Coordinate


def google_maps_url(coord: Coordinate, name: str) -> str:
    q = urllib.parse.quote(name, safe="")
    return (
        "https://www.google.com/maps/dir/?api=1"
        f"&destination={coord.lat},{coord.lon}&travelmode=driving&avoid=tolls,highways&query={q}"
    )


def osmand_url(coord: Coordinate, name: str) -> str:
    q = urllib.parse.quote(name, safe="")
    return f"osmand://navigate?lat={coord.lat}&lon={coord.lon}&z=16&title={q}"


def apple_maps_url(coord: Coordinate) -> str:
    return f"maps://maps.apple.com/?daddr={coord.lat},{coord.lon}&dirflg=d"


def navigation_links(coord: Coordinate, name: str) -> Dict[str, str]:
    return {
        "google": google_maps_url(coord, name),
        "osmand": osmand_url(coord, name),
        "apple": apple_maps_url(coord),
    }
