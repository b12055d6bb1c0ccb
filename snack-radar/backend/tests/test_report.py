from models import AmenityRecord, Coordinate
from services.report import build_report, feature_labels


def test_build_report_basic():
    center = Coordinate(lat=-36.8485, lon=174.7633)
    r = AmenityRecord(
        id="node/1",
        coordinate=Coordinate(lat=-36.8567, lon=174.7649),
        display_name="Queen St Dairy",
        raw_tags={"shop": "convenience"},
        brand="Night 'n Day",
        is_24h=True,
        has_atm=True,
        is_open_now=True,
        opening_hours_human="24/7",
    )
    md = build_report([r], center, 2000)
    assert "## Snack Radar Results" in md
    assert "Found: 1 snack spots" in md
    assert "#### 1. Queen St Dairy (Open now)" in md
    assert "convenience • 0.9 km" in md
    assert "Hours: 24/7" in md
    assert "Features: 24/7, ATM" in md
    assert "Search radius: 2.0 km" in md


def test_build_report_empty():
    md = build_report([], None)
    assert "Found: 0 snack spots" in md
    assert "No results" in md


def test_feature_labels_follow_feature_table():
    r = AmenityRecord(id="node/2", coordinate=None, display_name="x", is_vending_machine=True, sells_cigarettes=True)
    assert feature_labels(r) == ["Vending machine", "Cigarettes"]
