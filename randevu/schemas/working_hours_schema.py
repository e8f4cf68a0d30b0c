import re
from pydantic import BaseModel, Field, field_validator, model_validator

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class WorkingHoursBase(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday ... 6 = Saturday")
    start_time: str = Field(..., examples=["09:00"])
    end_time: str = Field(..., examples=["18:00"])
    is_available: bool = True

    @field_validator('start_time', 'end_time')
    @classmethod
    def time_must_be_hh_mm(cls, v):
        if not TIME_PATTERN.match(v):
            raise ValueError('time must be in HH:mm format')
        return v

    @model_validator(mode='after')
    def end_time_must_be_after_start_time(self):
        if self.end_time <= self.start_time:
            raise ValueError('end_time must be after start_time')
        return self


class WorkingHoursSet(WorkingHoursBase):
    pass


class WorkingHoursResponse(WorkingHoursBase):
    id: str
    barber_id: str

    class Config:
        from_attributes = True
