from sqlalchemy import Column, String, Float, Date, DateTime, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from freshtrack.database import Base, BaseMixin


class FoodItem(BaseMixin, Base):
    __tablename__ = "food_items"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    quantity = Column(Float, default=1, nullable=False)
    unit = Column(String, default="pcs", nullable=False)
    expiry_date = Column(Date, nullable=False, index=True)
    added_date = Column(Date, nullable=False)
    barcode = Column(String)
    notes = Column(Text)
    image_url = Column(String)
    # Set when the item is moved to the trash
    deleted_at = Column(DateTime(timezone=True), index=True)

    user = relationship("User", back_populates="food_items")
