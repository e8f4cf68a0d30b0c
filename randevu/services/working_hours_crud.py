from typing import List, Optional
from sqlalchemy.orm import Session
from randevu.models.working_hours_model import WorkingHours
from randevu.schemas.working_hours_schema import WorkingHoursSet
from randevu.logger import get_logger

logger = get_logger(__name__)


class WorkingHoursCRUD:
    @staticmethod
    def set_working_hours(db: Session, barber_id: str, hours: List[WorkingHoursSet]) -> List[WorkingHours]:
        """Upsert one record per weekday for the barber"""
        try:
            existing = {
                wh.day_of_week: wh
                for wh in db.query(WorkingHours).filter(WorkingHours.barber_id == str(barber_id)).all()
            }
            for entry in hours:
                record = existing.get(entry.day_of_week)
                if record is None:
                    record = WorkingHours(barber_id=str(barber_id), day_of_week=entry.day_of_week)
                    db.add(record)
                    existing[entry.day_of_week] = record
                record.start_time = entry.start_time
                record.end_time = entry.end_time
                record.is_available = entry.is_available

            db.commit()
            logger.info(f"Working hours set for barber {barber_id}: {len(hours)} day(s)")
        except Exception as e:
            db.rollback()
            logger.error(f"Error setting working hours for barber {barber_id}: {str(e)}")
            raise
        return WorkingHoursCRUD.get_working_hours(db, barber_id)

    @staticmethod
    def get_working_hours(db: Session, barber_id: str) -> List[WorkingHours]:
        return (
            db.query(WorkingHours)
            .filter(WorkingHours.barber_id == str(barber_id))
            .order_by(WorkingHours.day_of_week)
            .all()
        )

    @staticmethod
    def get_for_day(db: Session, barber_id: str, day_of_week: int) -> Optional[WorkingHours]:
        return db.query(WorkingHours).filter(
            WorkingHours.barber_id == str(barber_id),
            WorkingHours.day_of_week == day_of_week,
        ).first()


working_hours_crud = WorkingHoursCRUD()
