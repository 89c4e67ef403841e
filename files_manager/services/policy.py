"""
Owner-or-public access rules for file records.

``identity`` is the user id a session token resolved to, or ``None`` for an
anonymous caller. Every check is a pure predicate over an already loaded
record, evaluated fresh on each request.
"""
from typing import Optional

from files_manager.models.file import FileKind, FileRecord

ANONYMOUS = None


def is_owner(identity: Optional[str], file: FileRecord) -> bool:
    return identity is not ANONYMOUS and identity == file.user_id


def can_read(identity: Optional[str], file: FileRecord) -> bool:
    """Raw content is readable by anyone once published, otherwise by the owner."""
    return file.is_public or is_owner(identity, file)


def can_write(identity: Optional[str], file: FileRecord) -> bool:
    # no public-write concept
    return is_owner(identity, file)


def can_create_under(identity: Optional[str], parent: Optional[FileRecord]) -> bool:
    """Root is always a valid target; otherwise the parent must be a folder.

    Ownership of the parent folder is not checked.
    """
    if parent is None:
        return True
    return parent.type == FileKind.FOLDER
