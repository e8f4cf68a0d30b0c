from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from randevu.services.service_crud import service_crud
from randevu.services.user_crud import user_crud
from randevu.schemas.service_schema import ServiceCreate, ServiceUpdate, ServiceResponse
from randevu.database import get_db
from randevu.security.auth import get_current_barber
from randevu.models.user_model import User
from randevu.logger import get_logger

service_router = APIRouter()
logger = get_logger(__name__)

# PUBLIC ENDPOINTS - Anyone can browse a barber's services


@service_router.get(
    "/barbers/{barber_id}/services", response_model=List[ServiceResponse], status_code=status.HTTP_200_OK
)
def get_barber_services(barber_id: str, db: Session = Depends(get_db)):
    """Active services offered by a barber"""
    try:
        user_crud.get_barber(db, barber_id)
        services = service_crud.get_services_by_owner(db, barber_id)
        return [ServiceResponse.model_validate(service) for service in services]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching services of barber {barber_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching services",
        )


# BARBER ENDPOINTS - Service management


@service_router.post(
    "/services", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED
)
def create_service(
    service: ServiceCreate,
    current_user: User = Depends(get_current_barber),
    db: Session = Depends(get_db),
):
    try:
        logger.info(f"Barber {current_user.email} creating service {service.name}")
        db_service = service_crud.create_service(db, service, current_user.id)
        return ServiceResponse.model_validate(db_service)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating service: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while creating service",
        )


@service_router.patch(
    "/services/{service_id}", response_model=ServiceResponse, status_code=status.HTTP_200_OK
)
def update_service(
    service_id: str,
    service_update: ServiceUpdate,
    current_user: User = Depends(get_current_barber),
    db: Session = Depends(get_db),
):
    try:
        logger.info(f"Barber {current_user.email} updating service {service_id}")
        db_service = service_crud.update_service(db, service_id, service_update, current_user.id)
        return ServiceResponse.model_validate(db_service)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating service {service_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while updating service",
        )


@service_router.delete(
    "/services/{service_id}", response_model=ServiceResponse, status_code=status.HTTP_200_OK
)
def deactivate_service(
    service_id: str,
    current_user: User = Depends(get_current_barber),
    db: Session = Depends(get_db),
):
    """Soft delete: the service is no longer bookable"""
    try:
        logger.info(f"Barber {current_user.email} deactivating service {service_id}")
        db_service = service_crud.deactivate_service(db, service_id, current_user.id)
        return ServiceResponse.model_validate(db_service)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deactivating service {service_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while deactivating service",
        )
