import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_current_user, get_storage, require_admin
from app.models.user_model import UserModel
from app.schemas.user_schemas import AdminUpdate
from app.storage.base import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserModel)
async def read_users_me(current_user: UserModel = Depends(get_current_user)):
    return current_user


@router.get("/{user_id}", response_model=UserModel)
async def get_user(
    user_id: int,
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(get_current_user),
):
    user = storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.put("/{user_id}/admin", response_model=UserModel, summary="Grant or revoke admin rights (Admin Only)")
async def set_user_admin(
    user_id: int,
    admin_in: AdminUpdate,
    storage: Storage = Depends(get_storage),
    current_user: UserModel = Depends(require_admin),
):
    if user_id == current_user.id and not admin_in.is_admin:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Admins cannot revoke their own admin rights")

    user = storage.set_user_admin(user_id, admin_in.is_admin)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info(f"User {current_user.id} set admin={user.is_admin} on user {user.id}")
    return user
