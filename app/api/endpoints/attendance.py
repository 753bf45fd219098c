import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_current_user, get_storage
from app.models.attendance_model import AttendanceModel
from app.models.user_model import UserModel
from app.schemas.attendance_schemas import AttendanceUpdate, AttendanceWithUser
from app.storage.base import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=AttendanceModel, summary="Set my attendance for a match")
async def set_attendance(
    attendance_in: AttendanceUpdate,
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(get_current_user),
):
    """
    Creates or overwrites the current user's RSVP for a match.

    - **matchId**: the match being answered.
    - **status**: one of `attending`, `notAttending`, `pending`.
    """
    if not storage.get_match(attendance_in.match_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")

    attendance = storage.update_attendance(current_user.id, attendance_in.match_id, attendance_in.status)
    logger.info(f"User {current_user.id} set {attendance.status.value} for match {attendance.match_id}")
    return attendance


@router.get("/match/{match_id}", response_model=List[AttendanceWithUser], summary="All RSVPs for a match")
async def list_match_attendances(
    match_id: int,
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(get_current_user),
):
    return storage.get_attendances_with_users(match_id)
