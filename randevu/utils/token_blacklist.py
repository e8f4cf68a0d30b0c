from datetime import datetime, timezone
from sqlalchemy.orm import Session
from randevu.models.token_blacklist import TokenBlacklist
from jose import jwt
from randevu.logger import get_logger

logger = get_logger(__name__)


class TokenBlacklistService:
    @staticmethod
    def blacklist_token(db: Session, token: str, expires_at: datetime) -> None:
        """Add a token to the blacklist"""
        try:
            payload = jwt.get_unverified_claims(token)
            jti = payload.get("jti")

            if not jti:
                logger.warning("Token without JTI cannot be blacklisted")
                return

            existing = db.query(TokenBlacklist).filter(TokenBlacklist.jti == jti).first()
            if existing:
                logger.info(f"Token with JTI {jti} already blacklisted")
                return

            db.add(TokenBlacklist(jti=jti, token=token, expires_at=expires_at))
            db.commit()
            logger.info(f"Token with JTI {jti} blacklisted")

        except Exception as e:
            logger.error(f"Error blacklisting token: {str(e)}")
            db.rollback()
            raise

    @staticmethod
    def is_token_blacklisted(db: Session, jti: str) -> bool:
        """Only unexpired entries count"""
        blacklisted_token = db.query(TokenBlacklist).filter(
            TokenBlacklist.jti == jti,
            TokenBlacklist.expires_at > datetime.now(timezone.utc)
        ).first()

        return blacklisted_token is not None


token_blacklist_service = TokenBlacklistService()
