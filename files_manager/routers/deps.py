import base64
import binascii
from typing import Optional

from fastapi import Depends, Header, Request

from files_manager.core.errors import UnauthorizedError
from files_manager.services.files import FileService
from files_manager.services.sessions import SessionManager
from files_manager.services.users import UserService


# --- services live on app.state, built once in create_app ---
def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_users(request: Request) -> UserService:
    return request.app.state.users


def get_files(request: Request) -> FileService:
    return request.app.state.files


# --- helper: resolve the x-token header to a user id ---
async def current_user_id(
    x_token: Optional[str] = Header(None),
    sessions: SessionManager = Depends(get_sessions),
) -> str:
    return await sessions.require_user(x_token)


async def optional_user_id(
    x_token: Optional[str] = Header(None),
    sessions: SessionManager = Depends(get_sessions),
) -> Optional[str]:
    return await sessions.resolve_session(x_token)


def basic_credentials(authorization: Optional[str] = Header(None)) -> tuple[str, str]:
    """Decode ``Authorization: Basic base64(email:password)``."""
    scheme, _, encoded = (authorization or "").partition(" ")
    if scheme.lower() != "basic" or not encoded:
        raise UnauthorizedError()
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise UnauthorizedError() from None

    email, sep, password = decoded.partition(":")
    if not sep or not email or not password:
        raise UnauthorizedError()
    return email, password
