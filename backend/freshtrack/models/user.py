from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from freshtrack.database import Base, BaseMixin


class User(BaseMixin, Base):
    __tablename__ = "users"

    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String)
    password_hash = Column(String, nullable=False)

    settings = relationship("UserSettings", back_populates="user", uselist=False, cascade="all, delete-orphan")
    food_items = relationship("FoodItem", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
    waste_logs = relationship("WasteLog", back_populates="user", cascade="all, delete-orphan")
    waste_goals = relationship("WasteGoal", back_populates="user", cascade="all, delete-orphan")


class UserSettings(BaseMixin, Base):
    __tablename__ = "user_settings"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), unique=True, nullable=False, index=True)
    theme = Column(String, default="system", nullable=False)
    notification_enabled = Column(Boolean, default=True, nullable=False)
    expiry_warning_days = Column(Integer, default=3, nullable=False)
    notification_frequency = Column(String, default="daily", nullable=False)
    notification_time = Column(String, default="08:00", nullable=False)

    user = relationship("User", back_populates="settings")
