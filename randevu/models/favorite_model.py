from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
import uuid
from randevu.database import Base


class Favorite(Base):
    __tablename__ = "favorites"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    customer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    barber_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    barber_name = Column(String, nullable=False)
    barber_image = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("customer_id", "barber_id", name="uq_favorite_customer_barber"),
    )
