"""File REST API: presigned upload, download/view, owner delete.

- POST   /api/v1/files/upload               -> signed PUT (chat attachment)
- GET    /api/v1/files/download/{filename}  -> signed GET, attachment
- GET    /api/v1/files/view/{filename}      -> signed GET, inline
- DELETE /api/v1/files/{file_id}            -> delete (uploader only)

File bytes never pass through this API; clients talk to the object store
with the returned URLs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.shared.types import FileCategory, UploadMetadata

if TYPE_CHECKING:
    from src.files.service import PresignedFileService
    from src.shared.types import AccessGrant, UploadGrant


class UploadRequest(BaseModel):
    """Metadata the client declares before uploading."""

    original_filename: str
    content_type: str
    size: int

    def to_metadata(self) -> UploadMetadata:
        return UploadMetadata(
            original_filename=self.original_filename,
            content_type=self.content_type,
            size=self.size,
        )


class FileInfo(BaseModel):
    """Public projection of a file record."""

    id: str
    filename: str
    original_name: str
    mime_type: str
    size: int
    category: str
    upload_date: str


class UploadUrlResponse(BaseModel):
    success: bool = True
    upload_url: str
    headers: dict[str, str]
    expires_at: str
    file: FileInfo


class FileUrlResponse(BaseModel):
    success: bool = True
    url: str
    headers: dict[str, str]
    filename: str
    content_type: str
    expires_at: str
    inline: bool


class DeleteResponse(BaseModel):
    success: bool
    message: str


def upload_response(grant: UploadGrant) -> UploadUrlResponse:
    return UploadUrlResponse(
        upload_url=grant.url,
        headers=grant.headers,
        expires_at=grant.expires_at.isoformat(),
        file=FileInfo(**grant.record.to_public()),
    )


def _file_url_response(grant: AccessGrant) -> FileUrlResponse:
    return FileUrlResponse(
        url=grant.url,
        headers=grant.headers,
        filename=grant.filename,
        content_type=grant.content_type,
        expires_at=grant.expires_at.isoformat(),
        inline=grant.inline,
    )


def create_file_router(*, service: PresignedFileService) -> APIRouter:
    """Create the file API router bound to a PresignedFileService."""
    router = APIRouter(prefix="/api/v1/files", tags=["files"])

    @router.post("/upload", response_model=UploadUrlResponse)
    async def upload_file(body: UploadRequest, request: Request) -> UploadUrlResponse:
        """Validate metadata and return a presigned PUT URL for a chat attachment."""
        user_id: str = request.state.user_id
        grant = await service.request_upload(body.to_metadata(), user_id, FileCategory.CHAT)
        return upload_response(grant)

    @router.get("/download/{filename}", response_model=FileUrlResponse)
    async def download_file(filename: str, request: Request) -> FileUrlResponse:
        grant = await service.request_access(filename, request.state.user_id, inline=False)
        return _file_url_response(grant)

    @router.get("/view/{filename}", response_model=FileUrlResponse)
    async def view_file(filename: str, request: Request) -> FileUrlResponse:
        grant = await service.request_access(filename, request.state.user_id, inline=True)
        return _file_url_response(grant)

    @router.delete("/{file_id}", response_model=DeleteResponse)
    async def delete_file(file_id: str, request: Request) -> DeleteResponse:
        await service.delete_owned(file_id, request.state.user_id)
        return DeleteResponse(success=True, message="File deleted")

    return router
