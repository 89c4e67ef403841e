import logging
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class DBClient:
    """Handle on the document store holding ``users`` and ``files``.

    Built once at process start and handed to every service that needs it.
    The underlying motor client connects lazily; ``connect`` only verifies
    the server answers and makes sure the unique email index exists.
    """

    def __init__(self, url: str, database: str, client: Optional[Any] = None):
        self.url = url
        self.database_name = database
        self._client = client if client is not None else AsyncIOMotorClient(url)
        self.db = self._client[database]

    @property
    def users(self):
        return self.db["users"]

    @property
    def files(self):
        return self.db["files"]

    async def connect(self) -> None:
        await self.db.command("ping")
        await self.users.create_index("email", unique=True)
        logger.info("MongoDB connected to %s/%s", self.url, self.database_name)

    async def close(self) -> None:
        self._client.close()
        logger.info("MongoDB connection closed")

    async def is_alive(self) -> bool:
        try:
            await self.db.command("ping")
            return True
        except PyMongoError as exc:
            logger.warning("MongoDB ping failed: %s", exc)
            return False

    async def nb_users(self) -> int:
        return await self.users.count_documents({})

    async def nb_files(self) -> int:
        return await self.files.count_documents({})
