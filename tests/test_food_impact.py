import pytest

from sustainability_engine.constants import SDG_KEYS
from sustainability_engine.food_impact import (
    annual_garden_impact,
    food_carbon_savings,
    food_growing_impact,
)


def test_food_carbon_savings():
    assert food_carbon_savings("potatoes", 2) == pytest.approx(0.84)
    assert food_carbon_savings("Tomatoes") == pytest.approx(1.9)
    # unknown crops fall back to average footprints
    assert food_carbon_savings("kohlrabi", 1) == pytest.approx(0.42)


def test_food_growing_impact_leafy_greens():
    impact = food_growing_impact("Kale", 2)
    assert impact["crop"] == "kale"
    assert impact["carbon_saved"] == pytest.approx(0.7)
    assert impact["packaging_saved"] == pytest.approx(80)
    assert impact["food_miles_saved"] == 200
    assert impact["water_saved"] == 40
    assert impact["transport_emissions_saved"] == pytest.approx(0.04)
    assert impact["sdg_impacts"]["sdg3"] == pytest.approx(20)
    assert impact["sdg_impacts"]["sdg2"] == pytest.approx(20)
    assert set(impact["sdg_impacts"]) == set(SDG_KEYS)


def test_food_growing_impact_other_groups():
    herbs = food_growing_impact("basil", 1)
    assert herbs["packaging_saved"] == pytest.approx(15)
    assert herbs["sdg_impacts"]["sdg9"] == pytest.approx(5)

    veg = food_growing_impact("leeks", 1)
    assert veg["packaging_saved"] == pytest.approx(25)


def test_food_growing_impact_bad_amount():
    impact = food_growing_impact("carrots", "a lot")
    assert impact["amount"] == 0
    assert impact["carbon_saved"] == 0


def test_annual_garden_impact():
    impact = annual_garden_impact(10)
    assert impact["total_yield"] == 40
    assert impact["carbon_saved"] == pytest.approx(16)
    assert impact["money_value"] == 200
    assert impact["meal_count"] == 160
    assert impact["food_miles_saved"] == 8000
    assert impact["sdg_impacts"]["sdg2"] == pytest.approx(100)
    assert impact["sdg_impacts"]["sdg4"] == pytest.approx(10)


def test_annual_garden_impact_default_area():
    assert annual_garden_impact()["total_yield"] == 40
