from freshtrack.models.user import User, UserSettings
from freshtrack.models.food_item import FoodItem
from freshtrack.models.notification import Notification
from freshtrack.models.waste import WasteLog, WasteGoal, CarbonFootprint

__all__ = [
    "User", "UserSettings", "FoodItem", "Notification",
    "WasteLog", "WasteGoal", "CarbonFootprint",
]
