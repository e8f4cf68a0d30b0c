from typing import List
from sqlalchemy.orm import Session
from randevu.models.favorite_model import Favorite
from randevu.services.user_crud import user_crud
from randevu.logger import get_logger

logger = get_logger(__name__)


class FavoriteCRUD:
    @staticmethod
    def get_favorite(db: Session, customer_id: str, barber_id: str):
        return db.query(Favorite).filter(
            Favorite.customer_id == str(customer_id),
            Favorite.barber_id == str(barber_id),
        ).first()

    @staticmethod
    def toggle_favorite(db: Session, customer_id: str, barber_id: str) -> bool:
        """Add the barber to favorites, or remove it if present. Returns the new state."""
        existing = FavoriteCRUD.get_favorite(db, customer_id, barber_id)
        try:
            if existing:
                db.delete(existing)
                db.commit()
                logger.info(f"Barber {barber_id} removed from favorites of {customer_id}")
                return False

            barber = user_crud.get_barber(db, barber_id)
            db.add(Favorite(
                customer_id=str(customer_id),
                barber_id=barber.id,
                barber_name=barber.full_name,
                barber_image=barber.photo_url,
            ))
            db.commit()
            logger.info(f"Barber {barber_id} added to favorites of {customer_id}")
            return True
        except Exception as e:
            db.rollback()
            logger.error(f"Error toggling favorite {barber_id} for {customer_id}: {str(e)}")
            raise

    @staticmethod
    def get_favorites(db: Session, customer_id: str) -> List[Favorite]:
        return (
            db.query(Favorite)
            .filter(Favorite.customer_id == str(customer_id))
            .order_by(Favorite.created_at.desc())
            .all()
        )

    @staticmethod
    def is_favorite(db: Session, customer_id: str, barber_id: str) -> bool:
        return FavoriteCRUD.get_favorite(db, customer_id, barber_id) is not None


favorite_crud = FavoriteCRUD()
