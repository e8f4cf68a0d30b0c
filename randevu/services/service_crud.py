from sqlalchemy.orm import Session
from typing import List, Optional
from randevu.exceptions import NotFoundError, ForbiddenError
from randevu.models.service_model import Service
from randevu.schemas.service_schema import ServiceCreate, ServiceUpdate
from randevu.logger import get_logger

logger = get_logger(__name__)


class ServiceCRUD:
    @staticmethod
    def create_service(db: Session, service: ServiceCreate, owner_id: str) -> Service:
        """Create a new service"""
        try:
            db_service = Service(
                name=service.name,
                description=service.description,
                price=service.price,
                duration_minutes=service.duration_minutes,
                owner_id=owner_id
            )
            db.add(db_service)
            db.commit()
            db.refresh(db_service)
            logger.info(f"Service created: {service.name} by barber {owner_id}")
            return db_service

        except Exception as e:
            db.rollback()
            logger.error(f"Error creating service: {str(e)}")
            raise

    @staticmethod
    def get_service_by_id(db: Session, service_id: str) -> Optional[Service]:
        return db.query(Service).filter(Service.id == str(service_id)).first()

    @staticmethod
    def get_barber_service(db: Session, service_id: str, barber_id: str) -> Service:
        """Active service offered by the given barber"""
        service = db.query(Service).filter(
            Service.id == str(service_id),
            Service.owner_id == str(barber_id),
            Service.is_active == True,
        ).first()
        if not service:
            raise NotFoundError("Service not found for this barber")
        return service

    @staticmethod
    def get_services_by_owner(
            db: Session, owner_id: str, active: Optional[bool] = True
    ) -> List[Service]:
        query = db.query(Service).filter(Service.owner_id == str(owner_id))
        if active is not None:
            query = query.filter(Service.is_active == active)
        return query.order_by(Service.name).all()

    @staticmethod
    def _get_owned(db: Session, service_id: str, owner_id: str) -> Service:
        db_service = ServiceCRUD.get_service_by_id(db, service_id)
        if not db_service:
            raise NotFoundError("Service not found")
        if db_service.owner_id != str(owner_id):
            raise ForbiddenError("Not authorized to modify this service")
        return db_service

    @staticmethod
    def update_service(db: Session, service_id: str, service_update: ServiceUpdate,
                       owner_id: str) -> Service:
        db_service = ServiceCRUD._get_owned(db, service_id, owner_id)

        try:
            for key, value in service_update.model_dump(exclude_unset=True).items():
                if value is not None:
                    setattr(db_service, key, value)

            db.commit()
            db.refresh(db_service)
            logger.info(f"Service updated: {service_id}")
            return db_service

        except Exception as e:
            db.rollback()
            logger.error(f"Error updating service {service_id}: {str(e)}")
            raise

    @staticmethod
    def deactivate_service(db: Session, service_id: str, owner_id: str) -> Service:
        # Existing appointments keep their snapshot, so services are never hard-deleted
        db_service = ServiceCRUD._get_owned(db, service_id, owner_id)

        try:
            db_service.is_active = False
            db.commit()
            db.refresh(db_service)
            logger.info(f"Service deactivated: {service_id}")
            return db_service

        except Exception as e:
            db.rollback()
            logger.error(f"Error deactivating service {service_id}: {str(e)}")
            raise


service_crud = ServiceCRUD()
