"""Profile image REST API.

- GET    /api/v1/users/me/profile-image  -> stored name of the current image
- POST   /api/v1/users/me/profile-image  -> signed PUT, replaces current image
- DELETE /api/v1/users/me/profile-image  -> remove current image
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.gateway.api.files import DeleteResponse, UploadRequest, UploadUrlResponse, upload_response

if TYPE_CHECKING:
    from src.files.profile import ProfileImageService


class ProfileImageResponse(BaseModel):
    success: bool = True
    filename: str | None


def create_profile_router(*, profiles: ProfileImageService) -> APIRouter:
    """Create the profile image router."""
    router = APIRouter(prefix="/api/v1/users/me", tags=["profile"])

    @router.get("/profile-image", response_model=ProfileImageResponse)
    async def get_profile_image(request: Request) -> ProfileImageResponse:
        filename = await profiles.get_profile_image(request.state.user_id)
        return ProfileImageResponse(filename=filename)

    @router.post("/profile-image", response_model=UploadUrlResponse)
    async def upload_profile_image(body: UploadRequest, request: Request) -> UploadUrlResponse:
        grant = await profiles.upload_profile_image(request.state.user_id, body.to_metadata())
        return upload_response(grant)

    @router.delete("/profile-image", response_model=DeleteResponse)
    async def delete_profile_image(request: Request) -> DeleteResponse:
        removed = await profiles.remove_profile_image(request.state.user_id)
        if removed:
            return DeleteResponse(success=True, message="Profile image removed")
        return DeleteResponse(success=True, message="No profile image set")

    return router
