from authlib.integrations.starlette_client import OAuth
from fastapi import Depends, HTTPException, Request, status

from app.core.config import Settings
from app.models.user_model import UserModel
from app.storage.base import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_oauth_client(request: Request) -> OAuth:
    return request.app.state.oauth


async def get_current_user_id(request: Request) -> int:
    """
    Retrieves user_id from session.
    Raises HTTPException if user is not authenticated.
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user_id


async def get_current_user(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> UserModel:
    user = storage.get_user(user_id)
    if not user:
        # Session outlived the user it points at
        request.session.clear()
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


async def require_admin(current_user: UserModel = Depends(get_current_user)) -> UserModel:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: Admin access required")
    return current_user
