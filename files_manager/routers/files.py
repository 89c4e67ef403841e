from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from files_manager.models.schemas import FileUpload
from files_manager.routers.deps import current_user_id, get_files, optional_user_id
from files_manager.services.files import FileService

router = APIRouter(prefix="/files")


# --- upload a new folder, file or image ---
@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_file(
    payload: FileUpload,
    user_id: str = Depends(current_user_id),
    files: FileService = Depends(get_files),
):
    record = await files.upload(user_id, payload)
    return record.to_response()


# --- list the caller's files under a folder, 20 per page ---
@router.get("")
async def list_files(
    parent_id: Optional[str] = Query(None, alias="parentId"),
    page: Optional[str] = Query(None),
    user_id: str = Depends(current_user_id),
    files: FileService = Depends(get_files),
):
    records = await files.list_files(user_id, parent_id, page)
    return [record.to_response() for record in records]


@router.get("/{file_id}")
async def show_file(
    file_id: str,
    user_id: str = Depends(current_user_id),
    files: FileService = Depends(get_files),
):
    record = await files.show(user_id, file_id)
    return record.to_response()


@router.put("/{file_id}/publish")
async def publish_file(
    file_id: str,
    user_id: str = Depends(current_user_id),
    files: FileService = Depends(get_files),
):
    record = await files.set_visibility(user_id, file_id, True)
    return record.to_response()


@router.put("/{file_id}/unpublish")
async def unpublish_file(
    file_id: str,
    user_id: str = Depends(current_user_id),
    files: FileService = Depends(get_files),
):
    record = await files.set_visibility(user_id, file_id, False)
    return record.to_response()


# --- raw content; anonymous callers see published files only ---
@router.get("/{file_id}/data")
async def file_data(
    file_id: str,
    user_id: Optional[str] = Depends(optional_user_id),
    files: FileService = Depends(get_files),
):
    content, mime_type = await files.get_content(user_id, file_id)
    return Response(content=content, media_type=mime_type)
