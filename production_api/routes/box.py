"""
Box description routes. There is conceptually one box record; every
operation targets the first one stored.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from production_api.auth import require_admin
from production_api.dependencies import get_box_repo
from production_api.errors import NotFoundError, ValidationError
from production_api.records import BoxDescription
from production_api.repository import Repository
from production_api.schemas import BoxPayload, BoxResponse

router = APIRouter(prefix="/box", tags=["Box"])


def _first(repo: Repository[BoxDescription]) -> BoxDescription:
    box = repo.find_one()
    if box is None:
        raise NotFoundError("Box not found")
    return box


@router.get("/getBoxDescription", response_model=BoxResponse)
def get_box_description(repo: Repository[BoxDescription] = Depends(get_box_repo)):
    return BoxResponse(**_first(repo).as_dict())


@router.put(
    "/updateBoxDescription",
    response_model=BoxResponse,
    dependencies=[Depends(require_admin)],
)
def update_box_description(
    payload: BoxPayload, repo: Repository[BoxDescription] = Depends(get_box_repo)
):
    box = _first(repo)
    updated = repo.update_by_id(box.id, {"description": payload.description})
    return BoxResponse(**updated.as_dict())


@router.post(
    "/addBoxDescription",
    response_model=BoxResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def add_box_description(
    payload: BoxPayload, repo: Repository[BoxDescription] = Depends(get_box_repo)
):
    if repo.find_one() is not None:
        raise ValidationError("Box description already exists")
    return BoxResponse(**repo.insert({"description": payload.description}).as_dict())
