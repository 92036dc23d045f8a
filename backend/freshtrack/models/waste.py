from datetime import date

from sqlalchemy import Column, String, Float, Date, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from freshtrack.database import Base, BaseMixin


class WasteLog(BaseMixin, Base):
    __tablename__ = "waste_log"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    food_item_id = Column(Uuid(as_uuid=True), ForeignKey("food_items.id", ondelete="SET NULL"), nullable=True)
    item_name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    quantity = Column(Float, nullable=False)
    unit = Column(String, nullable=False)
    disposal_type = Column(String, nullable=False, index=True)
    disposal_date = Column(Date, default=date.today, nullable=False, index=True)
    expiry_date = Column(Date, nullable=False)
    reason = Column(String)
    estimated_cost = Column(Float, default=0.0)
    carbon_footprint_kg = Column(Float, default=0.0)

    user = relationship("User", back_populates="waste_logs")


class WasteGoal(BaseMixin, Base):
    __tablename__ = "waste_goals"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    goal_type = Column(String, nullable=False)
    target_value = Column(Float, nullable=False)
    current_value = Column(Float, default=0.0, nullable=False)
    target_period = Column(String, default="monthly", nullable=False)
    start_date = Column(Date, default=date.today, nullable=False)
    end_date = Column(Date)
    is_active = Column(Boolean, default=True, nullable=False)

    user = relationship("User", back_populates="waste_goals")


class CarbonFootprint(BaseMixin, Base):
    __tablename__ = "carbon_footprint_data"

    category = Column(String, unique=True, index=True, nullable=False)
    carbon_per_kg = Column(Float, nullable=False)
