from typing import Optional

from app.models.attendance_model import AttendanceModel, AttendanceStatus
from app.models.camel_model import CamelModel
from app.models.user_model import UserModel


class AttendanceCreate(CamelModel):
    user_id: int
    match_id: int
    status: AttendanceStatus


class AttendanceUpdate(CamelModel):
    """Body of POST /api/attendance. The user comes from the session."""

    match_id: int
    status: AttendanceStatus


class AttendanceWithUser(AttendanceModel):
    user: Optional[UserModel] = None
