from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from randevu.services.favorite_crud import favorite_crud
from randevu.schemas.favorite_schema import FavoriteResponse, FavoriteToggleResponse
from randevu.database import get_db
from randevu.security.auth import get_current_customer
from randevu.models.user_model import User
from randevu.logger import get_logger

favorite_router = APIRouter()
logger = get_logger(__name__)


@favorite_router.post(
    "/favorites/{barber_id}", response_model=FavoriteToggleResponse, status_code=status.HTTP_200_OK
)
def toggle_favorite(
    barber_id: str,
    current_user: User = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    """Add the barber to favorites, or remove it if already there"""
    try:
        is_favorite = favorite_crud.toggle_favorite(db, current_user.id, barber_id)
        return FavoriteToggleResponse(barber_id=barber_id, is_favorite=is_favorite)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error toggling favorite {barber_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while updating favorites",
        )


@favorite_router.get(
    "/favorites", response_model=List[FavoriteResponse], status_code=status.HTTP_200_OK
)
def get_favorites(
    current_user: User = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    try:
        favorites = favorite_crud.get_favorites(db, current_user.id)
        return [FavoriteResponse.model_validate(favorite) for favorite in favorites]

    except Exception as e:
        logger.error(f"Error fetching favorites of {current_user.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching favorites",
        )


@favorite_router.get(
    "/favorites/{barber_id}", response_model=FavoriteToggleResponse, status_code=status.HTTP_200_OK
)
def is_favorite(
    barber_id: str,
    current_user: User = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    try:
        return FavoriteToggleResponse(
            barber_id=barber_id,
            is_favorite=favorite_crud.is_favorite(db, current_user.id, barber_id),
        )

    except Exception as e:
        logger.error(f"Error checking favorite {barber_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while checking favorites",
        )
