import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_current_user, get_storage, require_admin
from app.models.match_model import MatchModel
from app.models.user_model import UserModel
from app.schemas.auth_schemas import MessageResponse
from app.schemas.match_schemas import MatchBase, MatchCreate, MatchUpdate, MatchWithAttendance
from app.storage.base import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[MatchWithAttendance], summary="List all matches")
async def list_matches(
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(get_current_user),
):
    """
    Every match, earliest first, with its attendance summary and the
    current user's own RSVP.
    """
    return storage.get_all_matches_with_attendance(current_user.id)


@router.get("/upcoming", response_model=List[MatchWithAttendance], summary="List upcoming matches")
async def list_upcoming_matches(
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of matches to return"),
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(get_current_user),
):
    return storage.get_upcoming_matches_with_attendance(current_user.id, limit)


@router.get("/{match_id}", response_model=MatchWithAttendance)
async def get_match(
    match_id: int,
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(get_current_user),
):
    match = storage.get_match_with_attendance(match_id, current_user.id)
    if not match:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")
    return match


@router.post("", response_model=MatchModel, status_code=status.HTTP_201_CREATED, summary="Create Match (Admin Only)")
async def create_match(
    match_in: MatchBase,
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(require_admin),
):
    match = storage.create_match(MatchCreate(**match_in.model_dump(), created_by=current_user.id))
    logger.info(f"User {current_user.id} created match {match.id} against {match.opponent}")
    return match


@router.put("/{match_id}", response_model=MatchModel, summary="Update Match (Admin Only)")
async def update_match(
    match_id: int,
    match_in: MatchUpdate,
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(require_admin),
):
    try:
        match = storage.update_match(match_id, match_in.model_dump(exclude_unset=True))
    except ValueError as e:  # merged record failed validation
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not match:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")
    logger.info(f"User {current_user.id} updated match {match_id}")
    return match


@router.delete("/{match_id}", response_model=MessageResponse, summary="Delete Match (Admin Only)")
async def delete_match(
    match_id: int,
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(require_admin),
):
    if not storage.delete_match(match_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Match not found")
    logger.info(f"User {current_user.id} deleted match {match_id}")
    return MessageResponse(message="Match deleted successfully")
