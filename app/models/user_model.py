from typing import Optional

from pydantic import EmailStr

from app.models.camel_model import CamelModel


class UserModel(CamelModel):
    id: int
    email: EmailStr
    name: str
    picture: Optional[str] = None
    provider: str  # "google" or "microsoft"
    provider_id: str
    is_admin: bool = False
