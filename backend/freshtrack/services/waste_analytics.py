"""
Waste Analytics — disposal logging, goal progress and windowed summaries.

The waste log is append-only. Goals only ever move up: consumed or donated
items add their quantity, carbon or cost to the matching active goal.
"""

import logging
from collections import defaultdict
from datetime import date, timedelta

from sqlalchemy.orm import Session

from freshtrack.models.food_item import FoodItem
from freshtrack.models.waste import WasteLog, WasteGoal, CarbonFootprint
from freshtrack.services.events import broker
from freshtrack.services.item_images import delete_item_image
from freshtrack.services.notifications import delete_item_notifications

logger = logging.getLogger(__name__)

DISPOSAL_TYPES = ("wasted", "consumed", "donated", "composted")

# Disposals that count as "saved" food towards goals and cost savings
SAVED_DISPOSALS = ("consumed", "donated")


def get_carbon_footprint(db: Session, category: str) -> CarbonFootprint | None:
    return db.query(CarbonFootprint).filter(CarbonFootprint.category == category).first()


def list_active_goals(db: Session, user_id) -> list[WasteGoal]:
    return db.query(WasteGoal).filter(
        WasteGoal.user_id == user_id,
        WasteGoal.is_active == True,  # noqa: E712
    ).order_by(WasteGoal.created_at.desc()).all()


def create_goal(
    db: Session,
    user_id,
    goal_type: str,
    target_value: float,
    target_period: str = "monthly",
) -> WasteGoal:
    goal = WasteGoal(
        user_id=user_id,
        goal_type=goal_type,
        target_value=target_value,
        current_value=0.0,
        target_period=target_period,
        start_date=date.today(),
        is_active=True,
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


def deactivate_goal(db: Session, user_id, goal_id) -> WasteGoal | None:
    goal = db.query(WasteGoal).filter(
        WasteGoal.id == goal_id, WasteGoal.user_id == user_id
    ).first()
    if goal is None:
        return None
    goal.is_active = False
    goal.end_date = date.today()
    db.commit()
    db.refresh(goal)
    return goal


def _goal_increment(goal_type: str, disposal_type: str, quantity: float, carbon: float, cost: float) -> float:
    if disposal_type not in SAVED_DISPOSALS:
        return 0.0
    if goal_type == "monthly_waste_reduction":
        return quantity
    elif goal_type == "carbon_footprint_reduction":
        return carbon
    elif goal_type == "cost_savings":
        return cost
    return 0.0


def update_goal_progress(
    db: Session,
    user_id,
    disposal_type: str,
    quantity: float,
    carbon: float,
    cost: float,
) -> int:
    """Add a disposal's contribution to every matching active goal. Caller commits."""
    updated = 0
    for goal in list_active_goals(db, user_id):
        progress = _goal_increment(goal.goal_type, disposal_type, quantity, carbon, cost)
        if progress > 0:
            goal.current_value = (goal.current_value or 0) + progress
            updated += 1
    return updated


def log_disposal(
    db: Session,
    item: FoodItem,
    disposal_type: str,
    reason: str | None = None,
    estimated_cost: float | None = None,
    disposal_date: date | None = None,
) -> WasteLog:
    """
    Record the terminal event for a food item and remove it, with its
    reminders, from the inventory.

    The log entry keeps the item's name and category so it outlives the item.
    """
    footprint = get_carbon_footprint(db, item.category)
    carbon = footprint.carbon_per_kg * item.quantity if footprint else 0.0
    cost = estimated_cost or 0.0

    entry = WasteLog(
        user_id=item.user_id,
        food_item_id=item.id,
        item_name=item.name,
        category=item.category,
        quantity=item.quantity,
        unit=item.unit,
        disposal_type=disposal_type,
        disposal_date=disposal_date or date.today(),
        expiry_date=item.expiry_date,
        reason=reason,
        estimated_cost=cost,
        carbon_footprint_kg=carbon,
    )
    db.add(entry)
    update_goal_progress(db, item.user_id, disposal_type, item.quantity, carbon, cost)

    item_id, image_url = item.id, item.image_url
    delete_item_notifications(db, item.user_id, [item_id])
    db.delete(item)
    db.commit()
    db.refresh(entry)
    delete_item_image(entry.user_id, image_url)

    broker.publish(entry.user_id, "food_items", "DELETE", item_id)
    logger.info("Logged %s disposal of %s for user %s", disposal_type, entry.item_name, entry.user_id)
    return entry


def goal_percentage(current: float, target: float) -> float:
    if not target or target <= 0:
        return 0.0
    return min((current or 0) / target * 100, 100.0)


def get_waste_analytics(db: Session, user_id, days: int = 30, today: date | None = None) -> dict:
    """
    Fold the user's disposal log over the trailing `days` window.

    `waste_over_time` always has exactly `days` entries ending today, oldest
    first, with zero-filled days.
    """
    today = today or date.today()
    cutoff = today - timedelta(days=days)

    logs = db.query(WasteLog).filter(
        WasteLog.user_id == user_id,
        WasteLog.disposal_date >= cutoff,
    ).all()

    totals = {t: 0.0 for t in DISPOSAL_TYPES}
    wasted_by_category: dict[str, float] = defaultdict(float)
    daily: dict[date, dict[str, float]] = defaultdict(lambda: {"wasted": 0.0, "consumed": 0.0})

    for l in logs:
        if l.disposal_type in totals:
            totals[l.disposal_type] += l.quantity or 0
        if l.disposal_type == "wasted":
            wasted_by_category[l.category] += l.quantity or 0
        if l.disposal_type in ("wasted", "consumed"):
            daily[l.disposal_date][l.disposal_type] += l.quantity or 0

    waste_over_time = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        bucket = daily.get(day, {"wasted": 0.0, "consumed": 0.0})
        waste_over_time.append({
            "date": day,
            "wasted": bucket["wasted"],
            "consumed": bucket["consumed"],
        })

    carbon_footprint = sum(l.carbon_footprint_kg or 0 for l in logs)
    cost_savings = sum(l.estimated_cost or 0 for l in logs if l.disposal_type in SAVED_DISPOSALS)

    goal_progress = [
        {
            "type": g.goal_type,
            "current": g.current_value or 0,
            "target": g.target_value,
            "percentage": goal_percentage(g.current_value, g.target_value),
        }
        for g in list_active_goals(db, user_id)
    ]

    return {
        "total_wasted": totals["wasted"],
        "total_consumed": totals["consumed"],
        "total_donated": totals["donated"],
        "total_composted": totals["composted"],
        "waste_reduction": totals["consumed"] + totals["donated"] + totals["composted"],
        "carbon_footprint": round(carbon_footprint, 3),
        "cost_savings": round(cost_savings, 2),
        "wasted_by_category": dict(wasted_by_category),
        "waste_over_time": waste_over_time,
        "goal_progress": goal_progress,
    }
