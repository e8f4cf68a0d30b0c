from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey
import uuid
from randevu.database import Base
from sqlalchemy.orm import relationship


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    phone = Column(String, nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String, nullable=False, default="customer")
    address = Column(String, nullable=True)
    photo_url = Column(String, nullable=True)
    push_token = Column(String, nullable=True)
    # Employees belong to exactly one barber
    barber_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    status = Column(String, default="active")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    services = relationship("Service", back_populates="owner")
    working_hours = relationship("WorkingHours", back_populates="barber")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
