from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ServiceBase(BaseModel):
    name: str = Field(..., min_length=1, examples=["Saç Kesimi"])
    description: Optional[str] = Field(None, examples=["Yıkama ve fön dahil"])
    price: Decimal = Field(..., ge=0, decimal_places=2, examples=[250.00])
    duration_minutes: int = Field(..., gt=0, examples=[30])


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    duration_minutes: Optional[int] = Field(None, gt=0)


class ServiceResponse(ServiceBase):
    id: str
    is_active: bool
    created_at: datetime
    owner_id: str

    class Config:
        from_attributes = True
