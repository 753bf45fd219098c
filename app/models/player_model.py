from enum import Enum
from typing import Optional

from app.models.camel_model import CamelModel


class PlayerStatus(str, Enum):
    ACTIVE = "Active"
    INJURED = "Injured"
    INACTIVE = "Inactive"


class PlayerModel(CamelModel):
    id: int
    user_id: int
    position: Optional[str] = None
    status: PlayerStatus = PlayerStatus.ACTIVE
