import logging

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError

from files_manager.clients.db import DBClient
from files_manager.core.errors import UnauthorizedError, ValidationError
from files_manager.core.security import hash_password
from files_manager.models.schemas import UserCreate
from files_manager.models.user import User

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: DBClient):
        self.db = db

    async def register(self, payload: UserCreate) -> User:
        # Check if user exists
        if await self.db.users.find_one({"email": payload.email}):
            raise ValidationError("Already exist")

        doc = {"email": payload.email, "password": hash_password(payload.password)}
        try:
            result = await self.db.users.insert_one(doc)
        except DuplicateKeyError:
            # lost a race against a concurrent registration
            raise ValidationError("Already exist") from None

        doc["_id"] = result.inserted_id
        logger.info("Registered user %s", result.inserted_id)
        return User.from_document(doc)

    async def get(self, user_id: str) -> User:
        """Load the user behind a resolved session."""
        try:
            doc = await self.db.users.find_one({"_id": ObjectId(user_id)})
        except (InvalidId, TypeError):
            doc = None
        if doc is None:
            raise UnauthorizedError()
        return User.from_document(doc)
