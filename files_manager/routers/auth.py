from typing import Optional

from fastapi import APIRouter, Depends, Header, Response, status

from files_manager.routers.deps import basic_credentials, get_sessions
from files_manager.services.sessions import SessionManager

router = APIRouter()


@router.get("/connect")
async def connect(
    credentials: tuple[str, str] = Depends(basic_credentials),
    sessions: SessionManager = Depends(get_sessions),
):
    email, password = credentials
    token = await sessions.create_session(email, password)
    return {"token": token}


@router.get("/disconnect", status_code=status.HTTP_204_NO_CONTENT)
async def disconnect(
    x_token: Optional[str] = Header(None),
    sessions: SessionManager = Depends(get_sessions),
):
    await sessions.destroy_session(x_token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
