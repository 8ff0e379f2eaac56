"""
Direct image and video management in the bucket, keyed by filename.
"""

from __future__ import annotations

import os
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from production_api.auth import require_admin
from production_api.dependencies import get_storage_client
from production_api.errors import NotFoundError, ValidationError
from production_api.schemas import ImageListResponse, MessageResponse, StoredFileResponse
from production_api.storage import StorageClient

image_router = APIRouter(prefix="/image", tags=["Images"])
video_router = APIRouter(prefix="/video", tags=["Videos"])

IMAGE_MIME_TYPES = frozenset(
    {"image/jpeg", "image/png", "image/gif", "image/bmp", "image/webp"}
)
IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"})
VIDEO_MIME_TYPES = frozenset(
    {
        "video/mp4",
        "video/mpeg",
        "video/ogg",
        "video/webm",
        "video/quicktime",
        "video/x-msvideo",
        "video/x-matroska",
        "video/3gpp",
        "video/x-flv",
    }
)


def _check_type(file: UploadFile, allowed: frozenset, label: str) -> str:
    if not file.filename:
        raise ValidationError("File is required")
    content_type = (file.content_type or "").lower()
    if content_type not in allowed:
        raise ValidationError(f"Invalid file type. Only {label} are allowed.")
    return content_type


def _require_key(key: Optional[str], label: str) -> str:
    if not key:
        raise ValidationError(f"{label} key is required")
    return key


@image_router.post(
    "/uploadFile",
    response_model=StoredFileResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def upload_image(
    file: UploadFile = File(...),
    storage: StorageClient = Depends(get_storage_client),
):
    content_type = _check_type(file, IMAGE_MIME_TYPES, "images")
    storage.store(file.filename, file.file, content_type)
    return StoredFileResponse(
        message="Image uploaded successfully", url=storage.public_url(file.filename)
    )


@image_router.get("/getAllImages", response_model=ImageListResponse)
def list_images(storage: StorageClient = Depends(get_storage_client)):
    images = [
        storage.public_url(key)
        for key in storage.list_keys()
        if os.path.splitext(key)[1].lower() in IMAGE_EXTENSIONS
    ]
    if not images:
        return ImageListResponse(message="No images found", images=[])
    return ImageListResponse(message="Images retrieved successfully", images=images)


@image_router.delete(
    "/deleteFile",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_image(
    key: Optional[str] = Query(None),
    storage: StorageClient = Depends(get_storage_client),
):
    key = _require_key(key, "Image")
    storage.remove(key)
    return MessageResponse(message=f"Image '{key}' deleted successfully")


@image_router.put(
    "/updateFile",
    response_model=StoredFileResponse,
    dependencies=[Depends(require_admin)],
)
def update_image(
    key: Optional[str] = Query(None),
    file: UploadFile = File(...),
    storage: StorageClient = Depends(get_storage_client),
):
    key = _require_key(key, "Image")
    content_type = _check_type(file, IMAGE_MIME_TYPES, "images")
    # A put under the same key replaces the object in one step.
    storage.store(key, file.file, content_type)
    return StoredFileResponse(
        message=f"Image '{key}' updated successfully", url=storage.public_url(key)
    )


@video_router.post(
    "/uploadVideo",
    response_model=StoredFileResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def upload_video(
    file: UploadFile = File(...),
    storage: StorageClient = Depends(get_storage_client),
):
    content_type = _check_type(file, VIDEO_MIME_TYPES, "videos")
    storage.store(file.filename, file.file, content_type)
    return StoredFileResponse(
        message="Video uploaded successfully", url=storage.public_url(file.filename)
    )


@video_router.delete(
    "/deleteVideo",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_video(
    key: Optional[str] = Query(None),
    storage: StorageClient = Depends(get_storage_client),
):
    key = _require_key(key, "Video")
    if not storage.exists(key):
        raise NotFoundError(f"Video '{key}' not found in S3 bucket")
    storage.remove(key)
    return MessageResponse(message=f"Video '{key}' deleted successfully")


@video_router.put(
    "/updateFile",
    response_model=StoredFileResponse,
    dependencies=[Depends(require_admin)],
)
def update_video(
    key: Optional[str] = Query(None),
    file: UploadFile = File(...),
    storage: StorageClient = Depends(get_storage_client),
):
    key = _require_key(key, "Video")
    content_type = _check_type(file, VIDEO_MIME_TYPES, "videos")
    storage.store(key, file.file, content_type)
    return StoredFileResponse(
        message=f"Video '{key}' updated successfully", url=storage.public_url(key)
    )
