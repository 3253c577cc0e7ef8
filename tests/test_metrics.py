import pytest

from sustainability_engine.catalog import build_catalog, load_catalog
from sustainability_engine.metrics import (
    category_completion,
    classify_trend,
    highest_emission_source,
    net_carbon_impact,
    resource_totals,
    resource_trend,
    sdg_impact_percentage,
    sustainability_summary,
)
from sustainability_engine.storage import default_progress


def _series(*amounts):
    return [{"date": f"2024-05-{i + 1:02d}", "amount": a} for i, a in enumerate(amounts)]


def test_net_carbon_impact():
    progress = default_progress()
    progress["resource_usage"]["carbon"] = _series(10, -4)
    impact = net_carbon_impact(progress)
    assert impact.emissions == 10
    assert impact.reductions == 4
    assert impact.net_impact == 6
    assert impact.as_dict() == {"emissions": 10, "reductions": 4, "net_impact": 6}


def test_net_carbon_impact_empty_and_malformed():
    assert net_carbon_impact({}).as_dict() == {"emissions": 0, "reductions": 0, "net_impact": 0}
    progress = {"resource_usage": {"carbon": [{"amount": "bad"}, "junk", {"amount": -2}]}}
    assert net_carbon_impact(progress).reductions == 2


def test_sdg_impact_percentage():
    assert sdg_impact_percentage({}) == 0
    assert sdg_impact_percentage({"a": 50, "b": 0}) == 25
    assert sdg_impact_percentage({"a": 100}) == 100
    assert sdg_impact_percentage({"a": 250}) == 100
    assert sdg_impact_percentage({"a": -40}) == 0
    assert sdg_impact_percentage({"a": 1e308, "b": 1e308}) == 100
    assert sdg_impact_percentage({"a": -1e308, "b": -1e308}) == 0


def test_category_completion():
    catalog = build_catalog(
        {
            "water": {
                "name": "Water",
                "sdgs": ["sdg6"],
                "practices": [{"id": "w1", "name": "a"}, {"id": "w2", "name": "b"}, {"id": "w3", "name": "c"}],
            },
            "empty": {"name": "Empty", "practices": []},
        }
    )
    progress = {"active_practices": [{"id": "w1"}, {"id": "w2"}, {"id": "other"}]}
    assert category_completion(progress, catalog) == {"water": 67, "empty": 0}


@pytest.mark.parametrize(
    "amounts,lower_is_better,expected",
    [
        ((), True, "stable"),
        ((5,), True, "stable"),
        ((10, 5), True, "improving"),
        ((10, 5), False, "worsening"),
        ((5, 10), False, "improving"),
        ((4, 4, 4, 4), True, "stable"),
        ((10, 10, 10, 2, 2, 2), True, "improving"),
        ((1, 1, 1, 1, 5, 5, 5), True, "worsening"),
    ],
)
def test_classify_trend(amounts, lower_is_better, expected):
    assert classify_trend(_series(*amounts), lower_is_better) == expected


def test_classify_trend_orders_by_date():
    entries = [
        {"date": "2024-05-03", "amount": 2},
        {"date": "2024-05-01", "amount": 10},
    ]
    assert classify_trend(entries, lower_is_better=True) == "improving"


def test_resource_trend_uses_kind_direction():
    progress = default_progress()
    progress["resource_usage"]["water"] = _series(20, 10)
    progress["resource_usage"]["harvest"] = _series(20, 10)
    assert resource_trend(progress, "water") == "improving"
    assert resource_trend(progress, "harvest") == "worsening"
    assert resource_trend(progress, "compost") == "stable"


def test_resource_totals_include_extra_kinds():
    progress = default_progress()
    progress["resource_usage"]["water"] = _series(1.5, 2.5)
    progress["resource_usage"]["rainfall"] = _series(3)
    totals = resource_totals(progress)
    assert totals["water"] == 4.0
    assert totals["compost"] == 0
    assert totals["rainfall"] == 3.0


def test_highest_emission_source():
    progress = default_progress()
    assert highest_emission_source(progress) is None
    progress["resource_usage"]["carbon"] = [
        {"amount": 3, "metadata": {"activity": "mowing"}},
        {"amount": 2, "metadata": {"activity": "heating"}},
        {"amount": 2, "metadata": {"activity": "heating"}},
        {"amount": -9, "metadata": {"activity": "offset"}},
        {"amount": 50},
    ]
    assert highest_emission_source(progress) == "heating"


def test_sustainability_summary(ledger):
    ledger.add_practice("water-1")
    ledger.record_carbon_offset(4, "composting", "2024-05-01")
    progress = ledger.record_resource_usage("carbon", 10, "2024-05-02", {"activity": "mowing"})

    summary = sustainability_summary(progress, load_catalog())
    assert summary["active_practices"] == 1
    assert summary["carbon"] == {"emissions": 10.0, "reductions": 4.0, "net_impact": 6.0}
    assert summary["highest_emission_source"] == "mowing"
    assert summary["category_completion"]["water"] == 25
    assert summary["trends"]["carbon"] == "worsening"
    assert summary["resource_totals"]["carbon"] == 6.0
    assert summary["score"] == progress["score"]
    assert 0 <= summary["sdg_impact"] <= 100
