from typing import Optional

from pydantic import EmailStr

from app.models.camel_model import CamelModel


class UserCreate(CamelModel):
    email: EmailStr
    name: str
    picture: Optional[str] = None
    provider: str
    provider_id: str
    is_admin: bool = False


class AdminUpdate(CamelModel):
    is_admin: bool
