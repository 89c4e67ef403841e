"""
Request bodies, validated before they reach the services.

Failures use ``PydanticCustomError`` so the message stays exactly the one
the API returns (``{"error": "Missing name"}`` and friends).
"""
import base64
import binascii
import re
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_core import PydanticCustomError

from files_manager.models.file import ROOT_FOLDER_ID, FileKind

FILE_KINDS = {kind.value for kind in FileKind}

NON_BASE64 = re.compile(r"[^A-Za-z0-9+/]")


def decode_payload(data: str) -> bytes:
    """Decode base64 the lenient way: URL-safe alphabet, line breaks and
    missing padding are all accepted. Raises ``binascii.Error`` on leftovers
    that cannot form a byte."""
    cleaned = NON_BASE64.sub("", data.replace("-", "+").replace("_", "/"))
    cleaned += "=" * (-len(cleaned) % 4)
    return base64.b64decode(cleaned, validate=True)


def _missing(field: str) -> PydanticCustomError:
    return PydanticCustomError("missing_field", "Missing {field}", {"field": field})


class UserCreate(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

    @model_validator(mode="after")
    def check_required(self) -> "UserCreate":
        if not self.email:
            raise _missing("email")
        if not self.password:
            raise _missing("password")
        return self


class FileUpload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    type: Optional[str] = None
    parent_id: Union[int, str] = Field(ROOT_FOLDER_ID, alias="parentId")
    is_public: bool = Field(False, alias="isPublic")
    data: Optional[str] = None

    @model_validator(mode="after")
    def check_fields(self) -> "FileUpload":
        if not self.name:
            raise _missing("name")
        if self.type not in FILE_KINDS:
            raise _missing("type")
        if self.parent_id == "0":
            self.parent_id = ROOT_FOLDER_ID
        if self.kind != FileKind.FOLDER:
            if not self.data:
                raise _missing("data")
            try:
                payload = decode_payload(self.data)
            except (binascii.Error, ValueError):
                raise _missing("data") from None
            if not payload:
                raise _missing("data")
        return self

    @property
    def kind(self) -> FileKind:
        return FileKind(self.type)

    @property
    def payload(self) -> Optional[bytes]:
        """Decoded ``data``; ``None`` for folders."""
        if self.data is None or self.kind == FileKind.FOLDER:
            return None
        return decode_payload(self.data)

    @property
    def at_root(self) -> bool:
        return self.parent_id == ROOT_FOLDER_ID
