from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List
from randevu.services.review_crud import review_crud
from randevu.services.user_crud import user_crud
from randevu.schemas.review_schema import ReviewCreate, ReviewResponse, ReviewStats
from randevu.database import get_db
from randevu.security.auth import get_current_customer
from randevu.models.user_model import User
from randevu.logger import get_logger

review_router = APIRouter()
logger = get_logger(__name__)


@review_router.post(
    "/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED
)
def submit_review(
    review: ReviewCreate,
    current_user: User = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    """Review a completed appointment (once)"""
    try:
        logger.info(
            f"Customer {current_user.email} reviewing appointment {review.appointment_id}"
        )
        db_review = review_crud.submit_review(
            db, review.appointment_id, current_user.id, review.rating, review.comment
        )
        return ReviewResponse.model_validate(db_review)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating review: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while creating review",
        )


@review_router.get(
    "/barbers/{barber_id}/reviews",
    response_model=List[ReviewResponse],
    status_code=status.HTTP_200_OK,
)
def get_barber_reviews(
    barber_id: str,
    skip: int = Query(0, ge=0, description="Number of reviews to skip"),
    limit: int = Query(100, ge=1, le=100, description="Number of reviews to retrieve"),
    db: Session = Depends(get_db),
):
    """Reviews of a barber, newest first (public endpoint)"""
    try:
        user_crud.get_barber(db, barber_id)
        reviews = review_crud.get_barber_reviews(db, barber_id, skip, limit)
        return [ReviewResponse.model_validate(review) for review in reviews]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching reviews of barber {barber_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching reviews",
        )


@review_router.get(
    "/barbers/{barber_id}/reviews/stats",
    response_model=ReviewStats,
    status_code=status.HTTP_200_OK,
)
def get_barber_review_stats(barber_id: str, db: Session = Depends(get_db)):
    try:
        user_crud.get_barber(db, barber_id)
        return ReviewStats(**review_crud.get_barber_review_stats(db, barber_id))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching review stats of barber {barber_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching review statistics",
        )
