from typing import Optional

from pydantic import Field

from app.models.camel_model import CamelModel
from app.models.player_model import PlayerModel, PlayerStatus
from app.models.user_model import UserModel


class PlayerCreate(CamelModel):
    user_id: int
    position: Optional[str] = None
    status: PlayerStatus = PlayerStatus.ACTIVE


class PlayerUpdate(CamelModel):
    position: Optional[str] = Field(None, max_length=50)
    status: Optional[PlayerStatus] = None


class PlayerWithStats(PlayerModel):
    user: Optional[UserModel] = None
    attendance_rate: float
    attended_matches: int
    total_matches: int
