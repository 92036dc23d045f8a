"""Inventory dashboard numbers computed from the user's current items."""

from collections import defaultdict
from datetime import date, timedelta

from sqlalchemy.orm import Session

from freshtrack.models.food_item import FoodItem
from freshtrack.services.expiry import status_counts


def get_inventory_analytics(db: Session, user_id, today: date | None = None, trend_days: int = 30) -> dict:
    today = today or date.today()
    items = db.query(FoodItem).filter(
        FoodItem.user_id == user_id,
        FoodItem.deleted_at.is_(None),
    ).all()

    total = len(items)
    next_week = today + timedelta(days=7)
    expiring = sum(1 for i in items if today <= i.expiry_date <= next_week)

    category_counts: dict[str, int] = defaultdict(int)
    for i in items:
        category_counts[i.category] += 1

    by_expiry: dict[date, int] = defaultdict(int)
    for i in items:
        by_expiry[i.expiry_date] += 1
    expiry_trend = [
        {"date": today - timedelta(days=offset), "count": by_expiry.get(today - timedelta(days=offset), 0)}
        for offset in range(trend_days - 1, -1, -1)
    ]

    # Items not yet past their date count as saved
    saved = sum(1 for i in items if i.expiry_date >= today)

    return {
        "total_items": total,
        "expiring_items": expiring,
        "category_counts": dict(category_counts),
        "status_counts": status_counts((i.expiry_date for i in items), today),
        "expiry_trend": expiry_trend,
        "waste_reduction": {
            "items_saved": saved,
            "percentage_improvement": round(saved / total * 100) if total else 0,
        },
    }
