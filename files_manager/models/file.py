# files_manager/models/file.py
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# parentId of top-level records
ROOT_FOLDER_ID = 0


class FileKind(str, Enum):
    FOLDER = "folder"
    FILE = "file"
    IMAGE = "image"


class FileRecord(BaseModel):
    """A folder, file or image as stored in the ``files`` collection."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")           # owner, never changes
    name: str
    type: FileKind
    is_public: bool = Field(False, alias="isPublic")
    parent_id: Union[int, str] = Field(ROOT_FOLDER_ID, alias="parentId")
    local_path: Optional[str] = Field(None, alias="localPath", exclude=True)  # payload location, not exposed
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    @property
    def is_folder(self) -> bool:
        return self.type == FileKind.FOLDER

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "FileRecord":
        parent = doc.get("parentId", ROOT_FOLDER_ID)
        return cls(
            id=str(doc["_id"]),
            user_id=str(doc["userId"]),
            name=doc["name"],
            type=doc["type"],
            is_public=doc.get("isPublic", False),
            parent_id=ROOT_FOLDER_ID if parent in (ROOT_FOLDER_ID, "0", None) else str(parent),
            local_path=doc.get("localPath"),
            created_at=doc.get("createdAt"),
        )

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
