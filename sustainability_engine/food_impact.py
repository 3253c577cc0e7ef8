"""Estimate carbon and SDG benefits of growing food at home."""

from __future__ import annotations

from typing import Any, Dict

from .constants import SDG_KEYS
from .utils import coerce_amount, load_dataset, normalize_key, round_half_up

DATA_FILE = "food_carbon_footprint.yaml"

DEFAULT_STORE_BOUGHT = 0.5
DEFAULT_HOME_GROWN = 0.08
WATER_SAVED_L_PER_KG = 20
TRANSPORT_KG_CO2_PER_KM = 0.1 / 1000
YIELD_KG_PER_M2 = 4
VALUE_EUR_PER_KG = 5
PORTION_KG = 0.25

# Per-kg SDG contribution of any home grown crop.
_BASE_SDG_RATES: Dict[str, float] = {
    "sdg2": 10,
    "sdg3": 5,
    "sdg4": 2,
    "sdg6": 8,
    "sdg7": 4,
    "sdg8": 3,
    "sdg9": 2,
    "sdg11": 5,
    "sdg12": 10,
    "sdg13": 8,
    "sdg14": 3,
    "sdg15": 5,
}

# Extra per-kg contribution for crop groups.
_CROP_BONUSES: tuple[tuple[frozenset[str], Dict[str, float]], ...] = (
    (frozenset({"kale", "cabbage", "spinach", "lettuce"}), {"sdg3": 5}),
    (frozenset({"apples", "strawberries", "berries"}), {"sdg15": 5, "sdg3": 3}),
    (frozenset({"herbs", "basil", "parsley", "mint", "thyme"}), {"sdg3": 4, "sdg9": 3}),
    (frozenset({"potatoes", "onions", "carrots"}), {"sdg2": 5, "sdg8": 3}),
)

_PACKAGING_GROUPS: tuple[tuple[frozenset[str], str], ...] = (
    (frozenset({"basil", "parsley", "mint", "thyme"}), "herbs"),
    (frozenset({"apples", "strawberries"}), "fruits"),
    (frozenset({"kale", "cabbage"}), "leafy_greens"),
)

# Annual SDG contribution per kg of yield (``yield``) or per m2 (``area``).
_ANNUAL_SDG_RATES: Dict[str, tuple[str, float]] = {
    "sdg2": ("yield", 2.5),
    "sdg3": ("yield", 2.0),
    "sdg4": ("area", 1.0),
    "sdg6": ("yield", 2.0),
    "sdg7": ("yield", 1.0),
    "sdg8": ("yield", 0.75),
    "sdg9": ("area", 0.5),
    "sdg11": ("area", 1.25),
    "sdg12": ("yield", 2.5),
    "sdg13": ("yield", 2.0),
    "sdg14": ("yield", 0.75),
    "sdg15": ("area", 1.5),
}

__all__ = [
    "food_carbon_savings",
    "food_growing_impact",
    "annual_garden_impact",
]


def _footprint(section: str, crop: str, default: float) -> float:
    table = load_dataset(DATA_FILE).get(section, {})
    try:
        return float(table.get(normalize_key(crop), default))
    except (TypeError, ValueError):
        return default


def food_carbon_savings(crop: str, quantity_kg: float = 1) -> float:
    """Return kg CO2e saved by growing ``quantity_kg`` of ``crop`` at home."""

    store = _footprint("store_bought", crop, DEFAULT_STORE_BOUGHT)
    home = _footprint("home_grown", crop, DEFAULT_HOME_GROWN)
    return (store - home) * coerce_amount(quantity_kg)


def _packaging_group(crop: str) -> str:
    for members, group in _PACKAGING_GROUPS:
        if crop in members:
            return group
    return "average_vegetable"


def food_growing_impact(crop: str, amount_kg: float) -> Dict[str, Any]:
    """Return carbon, packaging, water and SDG estimates for a harvest."""

    key = normalize_key(crop)
    amount = coerce_amount(amount_kg)
    data = load_dataset(DATA_FILE)

    packaging_rates = data.get("packaging_saved", {})
    packaging = coerce_amount(packaging_rates.get(_packaging_group(key))) * amount
    food_miles = coerce_amount(data.get("average_food_miles", {}).get("domestic_produce"))

    sdg_impacts = {sdg: rate * amount for sdg, rate in _BASE_SDG_RATES.items()}
    for members, bonus in _CROP_BONUSES:
        if key in members:
            for sdg, rate in bonus.items():
                sdg_impacts[sdg] += rate * amount

    return {
        "crop": key,
        "amount": amount,
        "carbon_saved": food_carbon_savings(key, amount),
        "packaging_saved": packaging,
        "food_miles_saved": food_miles,
        "water_saved": amount * WATER_SAVED_L_PER_KG,
        "transport_emissions_saved": food_miles * TRANSPORT_KG_CO2_PER_KM * amount,
        "sdg_impacts": sdg_impacts,
    }


def annual_garden_impact(area_m2: float = 10) -> Dict[str, Any]:
    """Return conservative yearly estimates for a food garden of ``area_m2``."""

    area = coerce_amount(area_m2)
    total_yield = area * YIELD_KG_PER_M2
    food_miles = coerce_amount(
        load_dataset(DATA_FILE).get("average_food_miles", {}).get("domestic_produce")
    )
    sdg_impacts = {}
    for sdg in SDG_KEYS:
        basis, rate = _ANNUAL_SDG_RATES[sdg]
        sdg_impacts[sdg] = (total_yield if basis == "yield" else area) * rate

    return {
        "total_yield": total_yield,
        "carbon_saved": total_yield * 0.4,
        "packaging_saved": total_yield * 0.03,
        "water_saved": total_yield * WATER_SAVED_L_PER_KG,
        "money_value": total_yield * VALUE_EUR_PER_KG,
        "meal_count": round_half_up(total_yield / PORTION_KG),
        "food_miles_saved": total_yield * food_miles,
        "sdg_impacts": sdg_impacts,
    }
