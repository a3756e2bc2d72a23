from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional

from storefront.core.dependencies import get_credentials, require_admin
from storefront.modules.users.schemas import Role, User, UserUpdate
from storefront.modules.users.service import UserService
from storefront.modules.users.store import CredentialStore

CANNOT_DEACTIVATE_SELF = "You cannot deactivate your own account"

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])


def get_user_service(credentials: CredentialStore = Depends(get_credentials)) -> UserService:
    return UserService(credentials)


@router.get("", response_model=List[User])
async def list_users(
    search: Optional[str] = None,
    role: Optional[Role] = None,
    service: UserService = Depends(get_user_service)
):
    """List registered users (admin only)"""
    return service.list_users(search=search, role=role)


@router.get("/{user_id}", response_model=User)
async def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    user = service.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.put("/{user_id}", response_model=User)
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    current_user: User = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    """Update a user's names, role or active flag"""
    if user_id == current_user.id and user_data.role not in (None, "admin"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot remove your own admin role")
    if user_id == current_user.id and user_data.is_active is False:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=CANNOT_DEACTIVATE_SELF)
    user = service.update_user(user_id, user_data)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    current_user: User = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    if user_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")
    if not service.delete_user(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return None


@router.post("/{user_id}/toggle-active", response_model=User)
async def toggle_user_status(
    user_id: str,
    current_user: User = Depends(require_admin),
    service: UserService = Depends(get_user_service)
):
    if user_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=CANNOT_DEACTIVATE_SELF)
    user = service.toggle_active(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
