from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional
from randevu.exceptions import AlreadyReviewedError, InvalidRatingError, NotCompletedError, NotFoundError
from randevu.models.review_model import Review
from randevu.models.appointment_model import Appointment
from randevu.notifications.fanout import publish_review_event
from randevu.schemas.appointment_schema import AppointmentStatus
from randevu.logger import get_logger

logger = get_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class ReviewCRUD:
    @staticmethod
    def submit_review(
            db: Session,
            appointment_id: str,
            customer_id: str,
            rating: int,
            comment: Optional[str] = None,
    ) -> Review:
        """Create the single review of a completed appointment"""
        if not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidRatingError()

        appointment = db.query(Appointment).filter(
            Appointment.id == str(appointment_id),
            Appointment.customer_id == str(customer_id)
        ).first()

        if not appointment:
            raise NotFoundError("Appointment not found or does not belong to you")

        if appointment.status != AppointmentStatus.completed.value:
            raise NotCompletedError()

        existing_review = db.query(Review).filter(Review.appointment_id == appointment.id).first()
        if existing_review or appointment.is_reviewed:
            raise AlreadyReviewedError()

        try:
            db_review = Review(
                appointment_id=appointment.id,
                customer_id=appointment.customer_id,
                barber_id=appointment.barber_id,
                rating=rating,
                comment=comment,
            )
            db.add(db_review)
            appointment.is_reviewed = True
            db.commit()
            db.refresh(db_review)
        except IntegrityError as e:
            db.rollback()
            # A concurrent submission won the unique appointment_id
            if ReviewCRUD.get_review_by_appointment(db, appointment_id) is not None:
                raise AlreadyReviewedError()
            logger.error(f"Error creating review: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error occurred while creating review"
            )
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating review: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error occurred while creating review"
            )

        logger.info(f"Review created: {db_review.id} for appointment {appointment.id}")
        publish_review_event(db, db_review)
        return db_review

    @staticmethod
    def get_review_by_appointment(db: Session, appointment_id: str) -> Optional[Review]:
        return db.query(Review).filter(Review.appointment_id == str(appointment_id)).first()

    @staticmethod
    def get_barber_reviews(db: Session, barber_id: str, skip: int = 0, limit: int = 100) -> List[Review]:
        return (
            db.query(Review)
            .filter(Review.barber_id == str(barber_id))
            .order_by(Review.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_barber_review_stats(db: Session, barber_id: str) -> dict:
        stats = db.query(
            func.count(Review.id).label('total_reviews'),
            func.avg(Review.rating).label('average_rating'),
            func.min(Review.rating).label('min_rating'),
            func.max(Review.rating).label('max_rating')
        ).filter(Review.barber_id == str(barber_id)).first()

        return {
            'barber_id': str(barber_id),
            'total_reviews': stats.total_reviews or 0,
            'average_rating': round(float(stats.average_rating), 2) if stats.average_rating else 0.0,
            'min_rating': stats.min_rating or 0,
            'max_rating': stats.max_rating or 0
        }


review_crud = ReviewCRUD()
