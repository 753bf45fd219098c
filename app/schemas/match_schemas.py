from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.core.datetime_utils import to_naive_utc
from app.models.attendance_model import AttendanceModel
from app.models.camel_model import CamelModel
from app.models.match_model import MatchModel
from app.models.user_model import UserModel


class MatchBase(CamelModel):
    date: datetime
    time: str = Field(..., min_length=1, description="Kick-off time, e.g. 19:30")
    opponent: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=200)
    details: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class MatchCreate(MatchBase):
    created_by: int


class MatchUpdate(CamelModel):
    date: Optional[datetime] = None
    time: Optional[str] = Field(None, min_length=1)
    opponent: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    details: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v) if v is not None else None


class AttendanceCount(CamelModel):
    attending: int
    total: int


class MatchWithAttendance(MatchModel):
    user_attendance: Optional[AttendanceModel] = None
    attendees: List[UserModel] = []
    attendance_count: AttendanceCount
