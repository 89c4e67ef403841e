from typing import Any

from pydantic import BaseModel, Field


class User(BaseModel):
    id: str
    email: str
    password: str = Field(exclude=True)  # werkzeug hash string

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "User":
        return cls(id=str(doc["_id"]), email=doc["email"], password=doc["password"])

    def to_response(self) -> dict[str, str]:
        return {"id": self.id, "email": self.email}
