from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ReviewCreate(BaseModel):
    appointment_id: str
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, max_length=1000, description="Review comment")


class ReviewResponse(BaseModel):
    id: str
    appointment_id: str
    customer_id: str
    barber_id: str
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ReviewStats(BaseModel):
    barber_id: str
    total_reviews: int
    average_rating: float
    min_rating: int
    max_rating: int
