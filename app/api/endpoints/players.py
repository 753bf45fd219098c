import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_current_user, get_storage, require_admin
from app.models.player_model import PlayerModel
from app.models.user_model import UserModel
from app.schemas.player_schemas import PlayerUpdate, PlayerWithStats
from app.storage.base import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[PlayerWithStats], summary="Team roster with attendance stats")
async def list_players(
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(get_current_user),
):
    return storage.get_players_with_stats()


@router.get("/{player_id}", response_model=PlayerWithStats)
async def get_player(
    player_id: int,
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(get_current_user),
):
    player = storage.get_player_with_stats(player_id)
    if not player:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Player not found")
    return player


@router.put("/{player_id}", response_model=PlayerModel, summary="Update Player (Admin Only)")
async def update_player(
    player_id: int,
    player_in: PlayerUpdate,
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(require_admin),
):
    """
    Updates a player's roster details.

    - **position** (optional): playing position, e.g. "Midfielder".
    - **status** (optional): one of `Active`, `Injured`, `Inactive`.
    """
    try:
        player = storage.update_player(player_id, player_in.model_dump(exclude_unset=True))
    except ValueError as e:  # merged record failed validation
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not player:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Player not found")
    logger.info(f"User {current_user.id} updated player {player_id}")
    return player
