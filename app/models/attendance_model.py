from enum import Enum

from app.models.camel_model import CamelModel


class AttendanceStatus(str, Enum):
    ATTENDING = "attending"
    NOT_ATTENDING = "notAttending"
    PENDING = "pending"


class AttendanceModel(CamelModel):
    id: int
    user_id: int
    match_id: int
    status: AttendanceStatus
