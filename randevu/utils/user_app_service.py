from datetime import datetime, timezone
from jose import jwt
from sqlalchemy.orm import Session
from randevu.models.user_model import User
from randevu.schemas.user_schema import (
    UserOut,
    UserLogin,
    LoginResponse,
    LogoutResponse,
    RefreshTokenRequest,
    RefreshTokenResponse,
)
from fastapi import HTTPException, status
from randevu.security.auth import (
    authenticate_user,
    create_access_token,
    create_refresh_token,
    verify_refresh_token,
)
from randevu.utils.token_blacklist import token_blacklist_service
from randevu.logger import get_logger

logger = get_logger(__name__)


class UserService:
    @staticmethod
    def login_user(db: Session, user_login: UserLogin) -> LoginResponse:
        user = authenticate_user(db, user_login.email, user_login.password)

        # Reactivate user status on successful login (in case they were logged out)
        if user.status != "active":
            user.status = "active"
            db.commit()
            db.refresh(user)
            logger.info(f"User status reactivated for: {user_login.email}")

        access_token, _ = create_access_token(data={"sub": str(user.id)})
        refresh_token, _ = create_refresh_token(data={"sub": str(user.id)})

        logger.info(f"User logged in: {user_login.email}")
        return LoginResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
            user=UserOut.model_validate(user),
        )

    @staticmethod
    def logout_user(
        db: Session,
        user: User,
        access_token: str,
        access_expires_at,
        refresh_token: str = None,
        refresh_expires_at=None,
    ) -> LogoutResponse:
        """
        Logout user by:
        1. Setting user status to 'inactive' (for logout tracking)
        2. Adding both access and refresh tokens to blacklist
        """
        try:
            user.status = "inactive"
            db.commit()
            db.refresh(user)

            token_blacklist_service.blacklist_token(db, access_token, access_expires_at)
            if refresh_token and refresh_expires_at:
                token_blacklist_service.blacklist_token(
                    db, refresh_token, refresh_expires_at
                )

            logger.info(f"User logged out: {user.email}")
            return LogoutResponse(message="Successfully logged out")

        except Exception as e:
            logger.error(f"Error during logout for user {user.email}: {str(e)}")
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error occurred during logout",
            )

    @staticmethod
    def refresh_access_token(
        db: Session, refresh_request: RefreshTokenRequest
    ) -> RefreshTokenResponse:
        """Rotate tokens: the old refresh token is revoked"""
        user = verify_refresh_token(refresh_request.refresh_token, db)

        old_payload = jwt.get_unverified_claims(refresh_request.refresh_token)
        old_expires_at = datetime.fromtimestamp(old_payload.get("exp"), tz=timezone.utc)
        token_blacklist_service.blacklist_token(
            db, refresh_request.refresh_token, old_expires_at
        )

        access_token, _ = create_access_token(data={"sub": str(user.id)})
        refresh_token, _ = create_refresh_token(data={"sub": str(user.id)})

        logger.info(f"Tokens refreshed for user: {user.email}")
        return RefreshTokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
        )


user_app_service = UserService()
