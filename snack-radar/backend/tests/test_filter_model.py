from __future__ import annotations

import pytest

from services.filter_model import FilterModel, SearchMode


def test_defaults_to_convenience_without_center() -> None:
    model = FilterModel()
    assert model.categories == {"shop=convenience"}
    assert model.mode is SearchMode.NONE
    assert model.radius_m == 2000
    assert not model.is_searchable()
    assert model.missing_requirement() == "Need a location first. Enter coordinates manually."


def test_searchable_once_center_is_set() -> None:
    model = FilterModel()
    model.set_center(-36.8485, 174.7633)
    assert model.is_searchable()
    assert model.missing_requirement() is None


def test_vending_mode_clears_categories() -> None:
    model = FilterModel(categories=["shop=convenience", "shop=bakery"])
    model.set_mode(SearchMode.VENDING_ONLY)
    assert model.categories == set()
    assert model.mode is SearchMode.VENDING_ONLY


def test_chain_mode_replaces_vending_mode() -> None:
    model = FilterModel()
    model.set_mode("vending_only")
    model.set_mode("chain_only")
    assert model.mode is SearchMode.CHAIN_ONLY
    assert model.categories == set()


def test_adding_category_clears_mode() -> None:
    model = FilterModel(categories=[])
    model.set_mode(SearchMode.CHAIN_ONLY)
    model.add_category("shop=bakery")
    assert model.mode is SearchMode.NONE
    assert model.categories == {"shop=bakery"}


def test_turning_mode_off_leaves_nothing_selected() -> None:
    model = FilterModel()
    model.set_center(0.0, 0.0)
    model.set_mode(SearchMode.VENDING_ONLY)
    model.set_mode(SearchMode.NONE)
    assert not model.is_searchable()
    assert model.missing_requirement() == "Pick at least one type"


def test_toggle_category_round_trip() -> None:
    model = FilterModel(categories=[])
    model.toggle_category("amenity=ice_cream")
    assert "amenity=ice_cream" in model.categories
    model.toggle_category("amenity=ice_cream")
    assert model.categories == set()


@pytest.mark.parametrize("radius", [499, 10001, 0, -500, 1500.5, True, "2000"])
def test_radius_out_of_bounds_rejected(radius) -> None:
    model = FilterModel()
    with pytest.raises(ValueError):
        model.set_radius(radius)
    assert model.radius_m == 2000


@pytest.mark.parametrize("radius", [500, 10000, 3000.0])
def test_radius_bounds_inclusive(radius) -> None:
    model = FilterModel()
    model.set_radius(radius)
    assert model.radius_m == int(radius)


def test_invalid_center_rejected() -> None:
    model = FilterModel()
    with pytest.raises(ValueError):
        model.set_center(91.0, 0.0)
    with pytest.raises(ValueError):
        model.set_center("north", 0.0)
    assert model.center is None


def test_unknown_category_and_filter_rejected() -> None:
    model = FilterModel()
    with pytest.raises(ValueError):
        model.add_category("shop=hardware")
    with pytest.raises(ValueError):
        model.set_amenity_filter("free_wifi")
    with pytest.raises(ValueError):
        model.set_mode("brand_only")


def test_amenity_filters_keep_declaration_order() -> None:
    model = FilterModel()
    model.set_amenity_filter("open_now")
    model.set_amenity_filter("has_toilet")
    model.set_amenity_filter("is_24h")
    assert model.ordered_amenity_filters() == ["is_24h", "has_toilet", "open_now"]
    assert model.wants_open_now()
    model.toggle_amenity_filter("open_now")
    assert not model.wants_open_now()
