from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from jose import jwt
from sqlalchemy.orm import Session
from typing import Annotated, List
from datetime import datetime, timezone
from randevu.services.user_crud import user_crud
from randevu.schemas.user_schema import UserCreate, UserOut, UserUpdate, UserLogin, LoginResponse, \
    LogoutResponse, RefreshTokenRequest, RefreshTokenResponse
from randevu.database import get_db
from randevu.security.auth import oauth2_scheme, get_current_user, get_current_active_user
from randevu.utils.user_app_service import user_app_service
from randevu.models.user_model import User
from randevu.logger import get_logger


user_router = APIRouter()
logger = get_logger(__name__)


# AUTH ENDPOINTS

@user_router.post("/auth/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    """Register a customer, barber or employee"""
    try:
        logger.info(f"Registering {user.role.value}: {user.email}")
        db_user = user_crud.create_user(db, user)
        return UserOut.model_validate(db_user)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error registering user {user.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while registering user"
        )


@user_router.post("/token", response_model=LoginResponse)
def user_token(
        form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
        db: Session = Depends(get_db),
):
    logger.info(f"Token request for user: {form_data.username}")
    try:
        user_login = UserLogin(email=form_data.username, password=form_data.password)
        return user_app_service.login_user(db, user_login)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error during token generation for {form_data.username}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


@user_router.post("/auth/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
def login_user(user_login: UserLogin, db: Session = Depends(get_db)):
    """Login user and return access and refresh tokens"""
    try:
        logger.info(f"Login attempt for user: {user_login.email}")
        return user_app_service.login_user(db, user_login)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error during login for {user_login.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred during login"
        )


@user_router.post("/auth/logout", response_model=LogoutResponse, status_code=status.HTTP_200_OK)
def logout_user(
        refresh_request: RefreshTokenRequest,
        current_user: User = Depends(get_current_user),
        token: str = Depends(oauth2_scheme),
        db: Session = Depends(get_db)
):
    """Logout user by blacklisting both access and refresh tokens"""
    try:
        access_payload = jwt.get_unverified_claims(token)
        access_expires_at = datetime.fromtimestamp(access_payload.get("exp"), tz=timezone.utc)

        refresh_payload = jwt.get_unverified_claims(refresh_request.refresh_token)
        refresh_expires_at = datetime.fromtimestamp(refresh_payload.get("exp"), tz=timezone.utc)

        return user_app_service.logout_user(
            db, current_user, token, access_expires_at,
            refresh_request.refresh_token, refresh_expires_at
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error during logout for user {current_user.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred during logout"
        )


@user_router.post("/auth/refresh", response_model=RefreshTokenResponse, status_code=status.HTTP_200_OK)
def refresh_access_token(refresh_request: RefreshTokenRequest, db: Session = Depends(get_db)):
    """Refresh access token using valid refresh token"""
    try:
        logger.info("Refreshing access token")
        return user_app_service.refresh_access_token(db, refresh_request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error refreshing token: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while refreshing token"
        )


# PROFILE ENDPOINTS

@user_router.get("/me", response_model=UserOut, status_code=status.HTTP_200_OK)
def get_current_user_profile(current_user: User = Depends(get_current_active_user)):
    return UserOut.model_validate(current_user)


@user_router.patch("/me", response_model=UserOut, status_code=status.HTTP_200_OK)
def update_current_user_profile(
        user_update: UserUpdate,
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db),
):
    """Edit own profile, including the device push token"""
    try:
        logger.info(f"User {current_user.email} updating profile")
        db_user = user_crud.update_user(db, current_user.id, user_update)
        return UserOut.model_validate(db_user)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating profile of {current_user.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while updating profile"
        )


@user_router.get("/barbers/{barber_id}/employees", response_model=List[UserOut], status_code=status.HTTP_200_OK)
def get_barber_employees(
        barber_id: str,
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db),
):
    try:
        employees = user_crud.get_employees(db, barber_id)
        return [UserOut.model_validate(employee) for employee in employees]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching employees of barber {barber_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching employees"
        )
