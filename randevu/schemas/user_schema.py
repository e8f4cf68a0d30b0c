from pydantic import BaseModel, EmailStr, Field, model_validator
from enum import Enum
from typing import Optional
from datetime import datetime


class Role(str, Enum):
    customer = "customer"
    barber = "barber"
    employee = "employee"


class UserBase(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    role: Role = Role.customer
    address: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)
    barber_id: Optional[str] = Field(None, description="Owning barber, required for employees")

    @model_validator(mode='after')
    def employee_must_have_barber(self):
        if self.role == Role.employee and not self.barber_id:
            raise ValueError('barber_id is required for employees')
        if self.role != Role.employee and self.barber_id:
            raise ValueError('barber_id is only allowed for employees')
        return self


class UserOut(UserBase):
    id: str
    photo_url: Optional[str] = None
    barber_id: Optional[str] = None
    status: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    """Profile edit. Role and email cannot be changed."""
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None
    photo_url: Optional[str] = None
    push_token: Optional[str] = None
    password: Optional[str] = Field(None, min_length=8)


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    user: UserOut


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class RefreshTokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str


class LogoutResponse(BaseModel):
    message: str
