from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from freshtrack.database import Base, BaseMixin, utcnow


class Notification(BaseMixin, Base):
    __tablename__ = "notifications"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String, nullable=False, index=True)
    message = Column(Text, nullable=False)
    # Not a foreign key: the item may be purged while the notification stays
    item_id = Column(Uuid(as_uuid=True), index=True)
    read = Column(Boolean, default=False, nullable=False)
    date = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="notifications")
