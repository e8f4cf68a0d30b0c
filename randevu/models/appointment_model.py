from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, Integer, Boolean, Text
import uuid
from randevu.database import Base


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    customer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    barber_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    employee_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    # Snapshot of the service at booking time, not a live reference
    service_name = Column(String, nullable=False)
    service_price = Column(Numeric(10, 2), nullable=False)
    service_duration = Column(Integer, nullable=False)

    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    time = Column(String(5), nullable=False)  # HH:mm
    status = Column(String, nullable=False, default="pending")
    notes = Column(Text, nullable=True)
    is_reviewed = Column(Boolean, default=False, nullable=False)

    # Set while the appointment holds its slot, NULL once terminal
    slot_key = Column(String, unique=True, nullable=True)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
