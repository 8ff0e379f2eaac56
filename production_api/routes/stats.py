"""
Stat routes (JSON only).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from production_api.auth import require_admin
from production_api.dependencies import get_stat_repo
from production_api.records import Stat
from production_api.repository import Repository
from production_api.schemas import MessageResponse, StatCreate, StatResponse, StatUpdate

router = APIRouter(prefix="/stats", tags=["Stats"])


def _response(stat: Stat) -> StatResponse:
    return StatResponse(**stat.as_dict())


@router.get("", response_model=list[StatResponse])
@router.get("/getStats", response_model=list[StatResponse], include_in_schema=False)
def list_stats(repo: Repository[Stat] = Depends(get_stat_repo)):
    return [_response(s) for s in repo.find_all()]


@router.post(
    "",
    response_model=StatResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
@router.post(
    "/addStats",
    response_model=StatResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
    include_in_schema=False,
)
def create_stat(payload: StatCreate, repo: Repository[Stat] = Depends(get_stat_repo)):
    return _response(repo.insert(payload.model_dump()))


@router.get("/{stat_id}", response_model=StatResponse)
def get_stat(stat_id: str, repo: Repository[Stat] = Depends(get_stat_repo)):
    return _response(repo.find_by_id(stat_id))


@router.put(
    "/{stat_id}",
    response_model=StatResponse,
    dependencies=[Depends(require_admin)],
)
@router.put(
    "/editStat/{stat_id}",
    response_model=StatResponse,
    dependencies=[Depends(require_admin)],
    include_in_schema=False,
)
def update_stat(
    stat_id: str,
    payload: StatUpdate,
    repo: Repository[Stat] = Depends(get_stat_repo),
):
    return _response(repo.update_by_id(stat_id, payload.model_dump(exclude_unset=True)))


@router.delete(
    "/{stat_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
@router.delete(
    "/deleteStat/{stat_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
    include_in_schema=False,
)
def delete_stat(stat_id: str, repo: Repository[Stat] = Depends(get_stat_repo)):
    repo.delete_by_id(stat_id)
    return MessageResponse(message="Stat deleted successfully")
