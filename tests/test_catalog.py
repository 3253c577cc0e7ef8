import logging

import pytest

from sustainability_engine.catalog import (
    build_catalog,
    get_practice,
    get_sdg_goal,
    impact_points,
    load_catalog,
    load_sdg_goals,
)
from sustainability_engine.constants import SDG_KEYS


def test_packaged_catalog_loads():
    catalog = load_catalog()
    assert len(catalog) >= 40
    assert "water" in catalog.categories
    assert "water-1" in catalog
    assert "missing-practice" not in catalog


def test_practice_lookup():
    practice = get_practice("water-1")
    assert practice is not None
    assert practice.name == "Rainwater Harvesting"
    assert practice.impact == "high"
    assert practice.points == 15
    assert practice.sdgs == ("sdg6", "sdg12")
    assert practice.category == "water"
    assert practice.category_name == "Water Conservation"
    assert get_practice("nope") is None


def test_practice_as_dict_lists_sdgs():
    data = get_practice("water-2").as_dict()
    assert data["sdgs"] == ["sdg6", "sdg12", "sdg15"]
    assert data["id"] == "water-2"


def test_all_practice_sdgs_are_tracked():
    for practice in load_catalog():
        assert practice.sdgs, practice.id
        assert set(practice.sdgs) <= set(SDG_KEYS)


def test_filters():
    catalog = load_catalog()
    high = catalog.by_impact("HIGH")
    assert high and all(p.impact == "high" for p in high)
    assert all("sdg14" in p.sdgs for p in catalog.for_sdg("sdg14"))
    assert catalog.category("Water-Protection").name == "Water Protection"
    assert catalog.category("unknown") is None


def test_impact_points():
    assert impact_points("high") == 15
    assert impact_points("Medium") == 10
    assert impact_points("low") == 5
    assert impact_points(None) == 5


def test_practice_inherits_category_sdgs():
    catalog = build_catalog(
        {
            "soil": {
                "name": "Soil",
                "sdgs": ["sdg13"],
                "practices": [{"id": "s1", "name": "No dig"}],
            }
        }
    )
    practice = catalog.get("s1")
    assert practice.sdgs == ("sdg13",)
    assert practice.impact == "low"
    assert practice.difficulty == "easy"


def test_build_catalog_rejects_invalid():
    with pytest.raises(ValueError):
        build_catalog({"soil": {"name": "Soil", "practices": [{"id": "s1", "name": "x", "impact": "huge"}]}})
    with pytest.raises(ValueError):
        build_catalog({"soil": {"name": "Soil"}})


def test_duplicate_ids_warn(caplog):
    raw = {
        "a": {"name": "A", "practices": [{"id": "dup", "name": "first"}]},
        "b": {"name": "B", "practices": [{"id": "dup", "name": "second"}]},
    }
    with caplog.at_level(logging.WARNING):
        catalog = build_catalog(raw)
    assert catalog.get("dup").name == "first"
    assert len(catalog) == 1
    assert "Duplicate practice id dup" in caplog.text


def test_catalog_overlay(tmp_path, monkeypatch):
    (tmp_path / "sustainability_practices.yaml").write_text(
        "water:\n  name: Water Wise\n"
    )
    monkeypatch.setenv("SUSTAINABILITY_OVERLAY_DIR", str(tmp_path))
    from sustainability_engine.utils import clear_dataset_cache

    clear_dataset_cache()
    load_catalog.cache_clear()
    assert load_catalog().category("water").name == "Water Wise"
    # overlay merges, practices keep their packaged values
    assert load_catalog().get("water-1").name == "Rainwater Harvesting"


def test_sdg_goals():
    goals = load_sdg_goals()
    assert set(goals) == set(SDG_KEYS)
    goal = get_sdg_goal("sdg6")
    assert goal.number == 6
    assert goal.name == "Clean Water and Sanitation"
    assert get_sdg_goal("sdg1") is None
