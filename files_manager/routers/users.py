from fastapi import APIRouter, Depends, status

from files_manager.models.schemas import UserCreate
from files_manager.routers.deps import current_user_id, get_users
from files_manager.services.users import UserService

router = APIRouter(prefix="/users")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, users: UserService = Depends(get_users)):
    user = await users.register(payload)
    return user.to_response()


@router.get("/me")
async def me(user_id: str = Depends(current_user_id), users: UserService = Depends(get_users)):
    user = await users.get(user_id)
    return user.to_response()
