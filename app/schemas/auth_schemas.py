from enum import Enum
from typing import Optional

from app.models.camel_model import CamelModel
from app.models.user_model import UserModel


class AuthProvider(str, Enum):
    GOOGLE = "google"
    MICROSOFT = "microsoft"


class AuthStatus(CamelModel):
    authenticated: bool
    user: Optional[UserModel] = None


class MessageResponse(CamelModel):
    message: str
