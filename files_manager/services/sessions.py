import logging
import uuid
from typing import Optional

from files_manager.clients.cache import RedisClient
from files_manager.clients.db import DBClient
from files_manager.core.errors import UnauthorizedError
from files_manager.core.security import verify_password

logger = logging.getLogger(__name__)

SESSION_TTL_SECONDS = 60 * 60 * 24


def session_key(token: str) -> str:
    return f"auth_{token}"


class SessionManager:
    """Issues, resolves and revokes session tokens.

    A session is a single cache entry ``auth_<token> -> user id`` that expires
    on its own after ``ttl`` seconds. This class is the only writer of those
    entries.
    """

    def __init__(self, db: DBClient, cache: RedisClient, ttl: int = SESSION_TTL_SECONDS):
        self.db = db
        self.cache = cache
        self.ttl = ttl

    async def create_session(self, email: str, password: str) -> str:
        # unknown email and wrong password fail the same way
        user = await self.db.users.find_one({"email": email}) if email else None
        if user is None or not verify_password(user.get("password", ""), password or ""):
            logger.warning("Rejected credentials")
            raise UnauthorizedError()

        token = str(uuid.uuid4())
        user_id = str(user["_id"])
        await self.cache.set(session_key(token), user_id, self.ttl)
        logger.info("Session opened for user %s", user_id)
        return token

    async def resolve_session(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        return await self.cache.get(session_key(token))

    async def require_user(self, token: Optional[str]) -> str:
        user_id = await self.resolve_session(token)
        if user_id is None:
            raise UnauthorizedError()
        return user_id

    async def destroy_session(self, token: Optional[str]) -> None:
        # a second call fails: the entry is already gone
        user_id = await self.require_user(token)
        await self.cache.delete(session_key(token))
        logger.info("Session closed for user %s", user_id)
