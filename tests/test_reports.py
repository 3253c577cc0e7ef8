import json
from datetime import datetime, timezone

import pytest

from sustainability_engine.reports import (
    dashboard_data,
    format_trend_data,
    percentage_change,
    usage_frame,
    usage_table,
)
from sustainability_engine.storage import default_progress

NOW = datetime(2024, 5, 31, tzinfo=timezone.utc)


def test_usage_frame_handles_mixed_dates():
    frame = usage_frame(
        [
            {"date": "2024-05-02", "amount": 2},
            {"date": "2024-05-01T10:00:00+00:00", "amount": "1.5"},
            {"date": "yesterday", "amount": 9},
            {"amount": 4},
            "junk",
        ]
    )
    assert frame["amount"].tolist() == [1.5, 2.0]
    assert str(frame["date"].dt.tz) == "UTC"


def test_usage_frame_empty():
    assert usage_frame(None).empty
    assert usage_frame([]).empty


def test_format_trend_data():
    entries = [
        {"date": "2024-03-01", "amount": 100},
        {"date": "2024-05-20", "amount": 4},
        {"date": "2024-05-10", "amount": 2},
    ]
    trend = format_trend_data(entries, days=30, now=NOW)
    assert trend["labels"] == ["10/5", "20/5"]
    assert trend["values"] == [2.0, 4.0]
    assert trend["moving_average"] == [2.0, 3.0]


def test_format_trend_data_empty():
    assert format_trend_data([], now=NOW) == {"labels": [], "values": [], "moving_average": []}


def test_percentage_change():
    entries = [
        {"date": "2024-04-15", "amount": 10},
        {"date": "2024-05-15", "amount": 15},
    ]
    assert percentage_change(entries, now=NOW) == {"percentage": 50, "is_positive": True}

    falling = [
        {"date": "2024-04-15", "amount": 20},
        {"date": "2024-05-15", "amount": 15},
    ]
    assert percentage_change(falling, now=NOW) == {"percentage": -25, "is_positive": False}


def test_percentage_change_edge_cases():
    assert percentage_change([{"date": "2024-05-15", "amount": 1}], now=NOW) == {
        "percentage": 0,
        "is_positive": False,
    }
    only_current = [
        {"date": "2024-05-14", "amount": 1},
        {"date": "2024-05-15", "amount": 2},
    ]
    assert percentage_change(only_current, now=NOW)["percentage"] == 0
    from_zero = [
        {"date": "2024-04-15", "amount": 0},
        {"date": "2024-05-15", "amount": 3},
    ]
    assert percentage_change(from_zero, now=NOW) == {"percentage": 100, "is_positive": True}


def test_usage_table():
    progress = default_progress()
    progress["resource_usage"]["water"] = [{"date": "2024-05-01", "amount": 3, "metadata": {"zone": "beds"}}]
    progress["resource_usage"]["carbon"] = [{"date": "2024-05-02", "amount": -1}]

    table = usage_table(progress)
    assert list(table.columns) == ["kind", "date", "amount", "metadata"]
    assert table["kind"].tolist() == ["water", "carbon"]
    assert json.loads(table.iloc[0]["metadata"]) == {"zone": "beds"}
    assert table.iloc[1]["metadata"] == "{}"


def test_usage_table_empty():
    table = usage_table(default_progress())
    assert table.empty
    assert list(table.columns) == ["kind", "date", "amount", "metadata"]


def test_dashboard_data():
    progress = default_progress()
    progress["resource_usage"]["water"] = [{"date": "2024-05-20", "amount": 4}]
    progress["sdg_scores"]["sdg6"] = 40

    data = dashboard_data(progress, now=NOW)
    assert set(data) == {
        "sdg_impact",
        "water_trend",
        "water_change",
        "compost_trend",
        "compost_change",
        "harvest_trend",
        "harvest_change",
        "carbon_trend",
        "carbon_change",
    }
    assert data["water_trend"]["values"] == [4.0]
    assert data["sdg_impact"]["sdg_keys"] == ["sdg6"]
    assert data["sdg_impact"]["data"] == [pytest.approx(2.0)]
