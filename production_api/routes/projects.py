"""
Project routes. Projects carry an ordered image list and an optional video.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from production_api.assets import AssetReconciler, UploadedAsset, single_group
from production_api.auth import require_admin
from production_api.config import Settings, get_settings
from production_api.dependencies import get_project_repo, get_reconciler
from production_api.errors import ValidationError
from production_api.records import Project
from production_api.repository import Repository
from production_api.schemas import MessageResponse, ProjectResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["Projects"])


def _submitted(files: Optional[list[UploadFile]]) -> list[UploadedAsset]:
    # Browsers post an empty part with no filename when nothing was picked.
    return [UploadedAsset.from_upload(f) for f in files or [] if f.filename]


def _response(project: Project) -> ProjectResponse:
    return ProjectResponse(**project.as_dict())


@router.get("", response_model=list[ProjectResponse])
@router.get("/getProjects", response_model=list[ProjectResponse], include_in_schema=False)
def list_projects(repo: Repository[Project] = Depends(get_project_repo)):
    return [_response(p) for p in repo.find_all()]


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
@router.post(
    "/addProject",
    response_model=ProjectResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
    include_in_schema=False,
)
def create_project(
    title: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    year: Optional[int] = Form(None),
    description: Optional[str] = Form(None),
    images: Optional[list[UploadFile]] = File(None),
    video: Optional[UploadFile] = File(None),
    repo: Repository[Project] = Depends(get_project_repo),
    reconciler: AssetReconciler = Depends(get_reconciler),
    settings: Settings = Depends(get_settings),
):
    """
    Upload the images (and the video, if any) in parallel, then save the project.
    Nothing is saved when an upload fails.
    """
    image_assets = _submitted(images)
    video_assets = _submitted([video] if video is not None else None)
    if len(image_assets) > settings.max_project_images:
        raise ValidationError(
            f"At most {settings.max_project_images} images are allowed per project"
        )

    data = {
        "title": title,
        "location": location,
        "year": year,
        "description": description,
        "images": [asset.filename for asset in image_assets],
        "video": None,
    }
    repo.validate(data)

    urls = reconciler.upload_all(image_assets + video_assets)
    data["images"] = list(dict.fromkeys(urls[: len(image_assets)]))
    if video_assets:
        data["video"] = urls[-1]

    project = repo.insert(data)
    logger.info("Created project %s with %d image(s)", project.id, len(project.images))
    return _response(project)


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: str, repo: Repository[Project] = Depends(get_project_repo)
):
    return _response(repo.find_by_id(project_id))


@router.put(
    "/{project_id}",
    response_model=ProjectResponse,
    dependencies=[Depends(require_admin)],
)
@router.put(
    "/updateProject/{project_id}",
    response_model=ProjectResponse,
    dependencies=[Depends(require_admin)],
    include_in_schema=False,
)
def update_project(
    project_id: str,
    title: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    year: Optional[int] = Form(None),
    description: Optional[str] = Form(None),
    images: Optional[list[UploadFile]] = File(None),
    video: Optional[UploadFile] = File(None),
    clearVideo: bool = Form(False),
    repo: Repository[Project] = Depends(get_project_repo),
    reconciler: AssetReconciler = Depends(get_reconciler),
    settings: Settings = Depends(get_settings),
):
    """
    Partial update. Text fields that are not sent keep their value.

    When ``images`` is sent, the stored image set is reconciled against it:
    stored images whose filename is not among the submitted files are deleted
    and every submitted file is uploaded. When ``images`` is not sent the
    image list is left alone. A new ``video`` replaces the old one; the video
    is only removed when ``clearVideo`` is true.
    """
    existing = repo.find_by_id(project_id)

    changes = {
        key: value
        for key, value in (
            ("title", title),
            ("location", location),
            ("year", year),
            ("description", description),
        )
        if value is not None
    }

    image_assets = _submitted(images)
    video_assets = _submitted([video] if video is not None else None)
    if len(image_assets) > settings.max_project_images:
        raise ValidationError(
            f"At most {settings.max_project_images} images are allowed per project"
        )

    # Images and video are reconciled together: one failed upload leaves no
    # new object behind for either field.
    fields = []
    groups = []
    if image_assets:
        fields.append("images")
        groups.append((existing.images, image_assets))
    if video_assets:
        fields.append("video")
        groups.append((single_group(existing.video), video_assets[:1]))
    for name, urls in zip(fields, reconciler.reconcile_groups(groups)):
        changes[name] = urls if name == "images" else urls[0]

    if not video_assets and clearVideo and existing.video:
        reconciler.remove_best_effort([existing.video])
        changes["video"] = None

    return _response(repo.update_by_id(project_id, changes))


@router.delete(
    "/{project_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
@router.delete(
    "/deleteProject/{project_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
    include_in_schema=False,
)
def delete_project(
    project_id: str,
    repo: Repository[Project] = Depends(get_project_repo),
    reconciler: AssetReconciler = Depends(get_reconciler),
):
    project = repo.find_by_id(project_id)
    # The record is only removed once every stored asset is gone.
    reconciler.remove_all(project.asset_urls())
    repo.delete_by_id(project_id)
    return MessageResponse(message="Project deleted successfully")
