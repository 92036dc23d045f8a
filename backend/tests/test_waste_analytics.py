"""Tests for disposal logging, goal progress and waste analytics."""

from datetime import timedelta

import pytest

from freshtrack.models.food_item import FoodItem
from freshtrack.models.notification import Notification
from freshtrack.models.waste import WasteGoal, WasteLog
from freshtrack.services.waste_analytics import (
    create_goal, deactivate_goal, get_waste_analytics, goal_percentage, log_disposal,
)


def _log(db, user, today, disposal_type, quantity, days_ago=0, category="dairy", cost=0.0, carbon=0.0):
    entry = WasteLog(
        user_id=user.id,
        item_name="thing",
        category=category,
        quantity=quantity,
        unit="pcs",
        disposal_type=disposal_type,
        disposal_date=today - timedelta(days=days_ago),
        expiry_date=today,
        estimated_cost=cost,
        carbon_footprint_kg=carbon,
    )
    db.add(entry)
    db.commit()
    return entry


def test_empty_window_is_zero_filled(db, user, today):
    result = get_waste_analytics(db, user.id, days=30, today=today)

    assert len(result["waste_over_time"]) == 30
    assert all(d["wasted"] == 0 and d["consumed"] == 0 for d in result["waste_over_time"])
    assert result["waste_over_time"][0]["date"] == today - timedelta(days=29)
    assert result["waste_over_time"][-1]["date"] == today
    assert result["total_wasted"] == 0
    assert result["wasted_by_category"] == {}
    assert result["goal_progress"] == []


@pytest.mark.parametrize("days", [1, 7, 90])
def test_window_length_matches_days(db, user, today, days):
    assert len(get_waste_analytics(db, user.id, days=days, today=today)["waste_over_time"]) == days


def test_totals_categories_and_series(db, user, other_user, today):
    _log(db, user, today, "wasted", 2, category="dairy", carbon=1.5)
    _log(db, user, today, "wasted", 1, days_ago=2, category="meat", carbon=10.0)
    _log(db, user, today, "consumed", 3, cost=4.5)
    _log(db, user, today, "donated", 1, cost=2.0)
    _log(db, user, today, "composted", 0.5, cost=9.0)
    _log(db, user, today, "wasted", 100, days_ago=45)
    _log(db, other_user, today, "wasted", 50)

    result = get_waste_analytics(db, user.id, days=30, today=today)

    assert result["total_wasted"] == 3
    assert result["total_consumed"] == 3
    assert result["total_donated"] == 1
    assert result["total_composted"] == 0.5
    assert result["waste_reduction"] == 4.5
    assert result["wasted_by_category"] == {"dairy": 2, "meat": 1}
    assert result["carbon_footprint"] == 11.5
    # Only consumed and donated count as savings
    assert result["cost_savings"] == 6.5

    series = {d["date"]: d for d in result["waste_over_time"]}
    assert series[today] == {"date": today, "wasted": 2, "consumed": 3}
    assert series[today - timedelta(days=2)]["wasted"] == 1


def test_goal_percentage_is_clamped():
    assert goal_percentage(20, 10) == 100
    assert goal_percentage(5, 10) == 50
    assert goal_percentage(0, 10) == 0


def test_goal_progress_in_analytics(db, user, today):
    goal = create_goal(db, user.id, "cost_savings", 10)
    goal.current_value = 20
    db.commit()

    progress = get_waste_analytics(db, user.id, today=today)["goal_progress"]
    assert progress == [{"type": "cost_savings", "current": 20, "target": 10, "percentage": 100}]


def test_log_disposal_removes_item_and_computes_carbon(db, user, make_item, carbon_data, today):
    item = make_item("Milk", days=1, category="dairy", quantity=2)
    item_id = item.id
    db.add(Notification(user_id=user.id, type="expiry", message="Milk expires tomorrow", item_id=item_id))
    db.commit()

    entry = log_disposal(db, item, "wasted", reason="spoiled", estimated_cost=3.0)

    assert entry.item_name == "Milk"
    assert entry.carbon_footprint_kg == pytest.approx(6.4)
    assert entry.disposal_date == today
    assert db.get(FoodItem, item_id) is None
    assert db.query(Notification).filter(Notification.item_id == item_id).count() == 0


def test_log_disposal_without_carbon_reference(db, user, make_item):
    item = make_item("Mystery", category="unknown")
    entry = log_disposal(db, item, "composted")
    assert entry.carbon_footprint_kg == 0
    assert entry.estimated_cost == 0


def test_goals_increment_only_for_saved_disposals(db, user, make_item, carbon_data):
    waste_goal = create_goal(db, user.id, "monthly_waste_reduction", 10)
    carbon_goal = create_goal(db, user.id, "carbon_footprint_reduction", 100)
    cost_goal = create_goal(db, user.id, "cost_savings", 50)

    log_disposal(db, make_item("Steak", category="meat", quantity=1), "consumed", estimated_cost=12)
    log_disposal(db, make_item("Milk", category="dairy", quantity=2), "wasted", estimated_cost=3)
    log_disposal(db, make_item("Cheese", category="dairy", quantity=1), "donated")

    db.refresh(waste_goal)
    db.refresh(carbon_goal)
    db.refresh(cost_goal)
    assert waste_goal.current_value == 2
    assert carbon_goal.current_value == pytest.approx(30.2)
    assert cost_goal.current_value == 12


def test_inactive_goals_are_not_updated(db, user, make_item):
    goal = create_goal(db, user.id, "monthly_waste_reduction", 10)
    deactivate_goal(db, user.id, goal.id)

    log_disposal(db, make_item("Milk"), "consumed")

    db.refresh(goal)
    assert goal.current_value == 0
    assert goal.is_active is False


# ── API ──────────────────────────────────────────────────────────

def test_api_dispose_and_analytics(client, make_item, carbon_data):
    item_id = make_item("Milk", category="dairy", quantity=1).id

    resp = client.post(f"/api/v1/items/{item_id}/dispose", json={"disposal_type": "wasted", "reason": "mold"})
    assert resp.status_code == 201
    assert resp.json()["disposal_type"] == "wasted"

    assert client.get(f"/api/v1/items/{item_id}").status_code == 404

    analytics = client.get("/api/v1/waste/analytics", params={"days": 7}).json()
    assert analytics["total_wasted"] == 1
    assert len(analytics["waste_over_time"]) == 7
    assert analytics["wasted_by_category"] == {"dairy": 1}

    log = client.get("/api/v1/waste/log").json()
    assert log["total"] == 1
    assert log["items"][0]["item_name"] == "Milk"


def test_api_rejects_unknown_disposal_type(client, make_item):
    item = make_item()
    resp = client.post(f"/api/v1/items/{item.id}/dispose", json={"disposal_type": "eaten"})
    assert resp.status_code == 422


def test_api_goals_lifecycle(client, db):
    resp = client.post("/api/v1/waste/goals", json={"goal_type": "cost_savings", "target_value": 25})
    assert resp.status_code == 201
    goal_id = resp.json()["id"]
    assert resp.json()["current_value"] == 0

    assert [g["id"] for g in client.get("/api/v1/waste/goals").json()] == [goal_id]

    resp = client.delete(f"/api/v1/waste/goals/{goal_id}")
    assert resp.json()["is_active"] is False
    assert client.get("/api/v1/waste/goals").json() == []
    assert db.query(WasteGoal).count() == 1


def test_api_goal_target_must_be_positive(client):
    resp = client.post("/api/v1/waste/goals", json={"goal_type": "cost_savings", "target_value": 0})
    assert resp.status_code == 422


def test_api_carbon_reference(client, carbon_data):
    body = client.get("/api/v1/waste/carbon-footprint").json()
    assert [r["category"] for r in body] == ["dairy", "meat"]
