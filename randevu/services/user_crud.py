from typing import List, Optional
from sqlalchemy.orm import Session
from randevu.exceptions import NotFoundError, BookingError
from randevu.schemas.user_schema import UserCreate, UserUpdate, Role
from randevu.models.user_model import User
from randevu.security.auth import get_password_hash
from randevu.logger import get_logger

logger = get_logger(__name__)


class UserCRUD:
    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == str(user_id), User.is_active == True).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_barber(db: Session, barber_id: str) -> User:
        barber = db.query(User).filter(
            User.id == str(barber_id),
            User.role == Role.barber.value,
            User.is_active == True,
        ).first()
        if not barber:
            raise NotFoundError("Barber not found")
        return barber

    @staticmethod
    def create_user(db: Session, user: UserCreate) -> User:
        if db.query(User).filter(User.email == user.email).first():
            raise BookingError("User with the email already exist")

        if user.role == Role.employee:
            UserCRUD.get_barber(db, user.barber_id)

        db_user = User(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone=user.phone,
            address=user.address,
            password_hash=get_password_hash(user.password),
            role=user.role.value,
            barber_id=user.barber_id,
            status="active",
            is_active=True,
        )
        try:
            db.add(db_user)
            db.commit()
            db.refresh(db_user)
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating user {user.email}: {str(e)}")
            raise
        logger.info(f"User created: {db_user.id} ({db_user.role})")
        return db_user

    @staticmethod
    def update_user(db: Session, user_id: str, user_update: UserUpdate) -> User:
        db_user = UserCRUD.get_user_by_id(db, user_id)
        if not db_user:
            raise NotFoundError("User not found")

        for key, value in user_update.model_dump(exclude_unset=True).items():
            if value is not None:
                if key == "password":
                    db_user.password_hash = get_password_hash(value)
                else:
                    setattr(db_user, key, value)

        try:
            db.commit()
            db.refresh(db_user)
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating user {user_id}: {str(e)}")
            raise
        logger.info(f"User updated: {user_id}")
        return db_user

    @staticmethod
    def get_employees(db: Session, barber_id: str) -> List[User]:
        UserCRUD.get_barber(db, barber_id)
        return (
            db.query(User)
            .filter(
                User.barber_id == str(barber_id),
                User.role == Role.employee.value,
                User.is_active == True,
            )
            .order_by(User.first_name, User.last_name)
            .all()
        )


user_crud = UserCRUD()
