from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class FavoriteResponse(BaseModel):
    id: str
    barber_id: str
    barber_name: str
    barber_image: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class FavoriteToggleResponse(BaseModel):
    barber_id: str
    is_favorite: bool
