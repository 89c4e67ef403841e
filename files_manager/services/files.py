"""
File metadata workflow: upload, show, list, publish/unpublish and raw content.

Ownership mismatches are reported exactly like unknown ids (``NotFoundError``)
so a caller cannot probe for other users' records.
"""
import logging
import mimetypes
from datetime import datetime, timezone
from typing import Any, Optional, Union

from bson import ObjectId
from pymongo.errors import PyMongoError

from files_manager.clients.db import DBClient
from files_manager.clients.storage import PayloadMissingError, PayloadStorageError
from files_manager.core.errors import BadRequestError, InternalError, NotFoundError, ValidationError
from files_manager.models.file import ROOT_FOLDER_ID, FileRecord
from files_manager.models.schemas import FileUpload
from files_manager.services import policy

logger = logging.getLogger(__name__)

PAGE_SIZE = 20
DEFAULT_MIME_TYPE = "application/octet-stream"


def parse_object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def parse_page(value: Union[int, str, None]) -> int:
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 0
    return max(page, 0)


def guess_mime_type(name: str) -> str:
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type or DEFAULT_MIME_TYPE


class FileService:
    def __init__(self, db: DBClient, storage, page_size: int = PAGE_SIZE):
        self.db = db
        self.storage = storage
        self.page_size = page_size

    async def _find(self, file_id: str) -> Optional[FileRecord]:
        oid = parse_object_id(file_id)
        if oid is None:
            return None
        doc = await self.db.files.find_one({"_id": oid})
        return FileRecord.from_document(doc) if doc else None

    async def _owned(self, identity: str, file_id: str) -> FileRecord:
        record = await self._find(file_id)
        if record is None or not policy.can_write(identity, record):
            raise NotFoundError()
        return record

    async def upload(self, identity: str, payload: FileUpload) -> FileRecord:
        parent_value: Union[int, ObjectId] = ROOT_FOLDER_ID
        if not payload.at_root:
            parent = await self._find(payload.parent_id)
            if parent is None:
                raise ValidationError("Parent not found")
            if not policy.can_create_under(identity, parent):
                raise ValidationError("Parent is not a folder")
            parent_value = ObjectId(parent.id)

        doc: dict[str, Any] = {
            "userId": identity,
            "name": payload.name,
            "type": payload.kind.value,
            "isPublic": payload.is_public,
            "parentId": parent_value,
            "createdAt": datetime.now(timezone.utc),
        }

        # payload first, then metadata; a failure in between is not rolled back
        try:
            data = payload.payload
            if data is not None:
                doc["localPath"] = await self.storage.save(data, guess_mime_type(payload.name))
            result = await self.db.files.insert_one(doc)
        except (PayloadStorageError, PyMongoError) as exc:
            logger.error("Saving %s %r failed: %s", payload.kind.value, payload.name, exc)
            raise InternalError("Error saving the file") from exc

        doc["_id"] = result.inserted_id
        logger.info("User %s uploaded %s %s", identity, payload.kind.value, result.inserted_id)
        return FileRecord.from_document(doc)

    async def show(self, identity: str, file_id: str) -> FileRecord:
        # metadata is owner-only, publishing does not change that
        return await self._owned(identity, file_id)

    async def list_files(self, identity: str, parent_id: Union[int, str, None] = ROOT_FOLDER_ID,
                         page: Union[int, str, None] = 0) -> list[FileRecord]:
        if parent_id in (None, "", ROOT_FOLDER_ID, "0"):
            parent_value: Union[int, ObjectId] = ROOT_FOLDER_ID
        else:
            parent_value = parse_object_id(parent_id)
            if parent_value is None:
                return []

        page_number = parse_page(page)
        pipeline = [
            {"$match": {"userId": identity, "parentId": parent_value}},
            {"$skip": page_number * self.page_size},
            {"$limit": self.page_size},
        ]
        docs = await self.db.files.aggregate(pipeline).to_list(length=None)
        return [FileRecord.from_document(doc) for doc in docs]

    async def set_visibility(self, identity: str, file_id: str, is_public: bool) -> FileRecord:
        record = await self._owned(identity, file_id)
        await self.db.files.update_one({"_id": ObjectId(record.id)}, {"$set": {"isPublic": is_public}})
        logger.info("User %s set %s public=%s", identity, record.id, is_public)

        updated = await self._find(record.id)
        if updated is None:
            raise NotFoundError()
        return updated

    async def get_content(self, identity: Optional[str], file_id: str) -> tuple[bytes, str]:
        record = await self._find(file_id)
        if record is None:
            raise NotFoundError()
        if record.is_folder:
            raise BadRequestError("A folder doesn't have content")
        if not policy.can_read(identity, record):
            raise NotFoundError()

        try:
            if not record.local_path:
                raise PayloadMissingError(record.id)
            content = await self.storage.load(record.local_path)
        except PayloadMissingError:
            logger.warning("Payload of file %s is missing from storage", record.id)
            raise NotFoundError() from None
        return content, guess_mime_type(record.name)
