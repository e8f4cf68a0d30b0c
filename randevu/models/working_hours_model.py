from sqlalchemy import Column, String, Boolean, ForeignKey, Integer, UniqueConstraint, CheckConstraint
import uuid
from randevu.database import Base
from sqlalchemy.orm import relationship


class WorkingHours(Base):
    __tablename__ = "working_hours"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    barber_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    is_available = Column(Boolean, default=True)

    barber = relationship("User", back_populates="working_hours")

    __table_args__ = (
        UniqueConstraint("barber_id", "day_of_week", name="uq_working_hours_barber_day"),
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="check_day_of_week_range"),
    )
