"""Storage API: upload, list, download, inspect and delete a client's files."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse

from app.core.auth import get_client_id
from app.core.dependencies import get_storage
from app.core.upload_validation import validate_upload
from app.schemas.storage import DeleteResponse, FileStatistics, StoredFileRecord
from app.storage.base import StorageBackend
from app.storage.mime import detect_mime_type
from app.storage.naming import parse_original_name

router = APIRouter(prefix="/storage", tags=["storage"])


async def _save_upload(
    request: Request,
    client_id: str,
    storage: StorageBackend,
    upload_file: Optional[UploadFile],
    owner: Optional[str],
) -> StoredFileRecord:
    if upload_file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    content = await upload_file.read()
    safe_name, err = validate_upload(
        upload_file.filename, len(content), request.app.state.max_upload_size
    )
    if err:
        raise HTTPException(status_code=413 if safe_name else 400, detail=err)
    return await storage.save(
        client_id,
        safe_name,
        content,
        mime_type=upload_file.content_type,
        owner=owner or None,
    )


@router.post("/upload", response_model=StoredFileRecord, status_code=201)
async def upload(
    request: Request,
    client_id: Annotated[str, Depends(get_client_id)],
    storage: Annotated[StorageBackend, Depends(get_storage)],
    file: Optional[UploadFile] = File(None),
    owner: Optional[str] = Form(None),
) -> StoredFileRecord:
    """
    Store one file in the client's namespace. An optional `owner` form field
    places it in that owner's subdirectory.
    """
    return await _save_upload(request, client_id, storage, file, owner)


@router.post("/upload-form-data", response_model=StoredFileRecord, status_code=201)
async def upload_form_data(
    request: Request,
    client_id: Annotated[str, Depends(get_client_id)],
    storage: Annotated[StorageBackend, Depends(get_storage)],
    file: Optional[UploadFile] = File(None),
    owner: Optional[str] = Form(None),
) -> StoredFileRecord:
    """Same as /upload; kept for clients posting plain form-data."""
    return await _save_upload(request, client_id, storage, file, owner)


@router.get("/list", response_model=list[StoredFileRecord])
async def list_files(
    client_id: Annotated[str, Depends(get_client_id)],
    storage: Annotated[StorageBackend, Depends(get_storage)],
) -> list[StoredFileRecord]:
    return await storage.list(client_id)


@router.get("/statistics", response_model=FileStatistics)
async def statistics(
    client_id: Annotated[str, Depends(get_client_id)],
    storage: Annotated[StorageBackend, Depends(get_storage)],
) -> FileStatistics:
    """File counts, bytes, per-category shares and size histogram for the client."""
    return await storage.statistics(client_id)


@router.get("/file/{reference:path}")
async def download(
    reference: str,
    client_id: Annotated[str, Depends(get_client_id)],
    storage: Annotated[StorageBackend, Depends(get_storage)],
) -> FileResponse:
    """Stream a file. `reference` is a stored name or owner/stored name."""
    path = await storage.fetch_path(client_id, reference)
    original_name = parse_original_name(path.name)
    return FileResponse(
        path,
        media_type=detect_mime_type(original_name),
        filename=original_name,
    )


@router.get("/file-info/{reference:path}", response_model=StoredFileRecord)
async def file_info(
    reference: str,
    client_id: Annotated[str, Depends(get_client_id)],
    storage: Annotated[StorageBackend, Depends(get_storage)],
) -> StoredFileRecord:
    return await storage.info(client_id, reference)


@router.delete("/file/{reference:path}", response_model=DeleteResponse)
async def delete_file(
    reference: str,
    client_id: Annotated[str, Depends(get_client_id)],
    storage: Annotated[StorageBackend, Depends(get_storage)],
) -> DeleteResponse:
    await storage.delete(client_id, reference)
    return DeleteResponse(success=True)
