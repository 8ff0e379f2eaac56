"""
Partner routes. Each partner has exactly one stored image.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from production_api.assets import AssetReconciler, UploadedAsset
from production_api.auth import require_admin
from production_api.dependencies import get_partner_repo, get_reconciler
from production_api.errors import ValidationError
from production_api.records import Partner
from production_api.repository import Repository
from production_api.schemas import MessageResponse, PartnerResponse

router = APIRouter(prefix="/partners", tags=["Partners"])


def _response(partner: Partner) -> PartnerResponse:
    return PartnerResponse(**partner.as_dict())


@router.get("", response_model=list[PartnerResponse])
@router.get("/getPartners", response_model=list[PartnerResponse], include_in_schema=False)
def list_partners(repo: Repository[Partner] = Depends(get_partner_repo)):
    return [_response(p) for p in repo.find_all()]


@router.post(
    "",
    response_model=PartnerResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
@router.post(
    "/addPartner",
    response_model=PartnerResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
    include_in_schema=False,
)
def create_partner(
    fullName: Optional[str] = Form(None),
    quote: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    repo: Repository[Partner] = Depends(get_partner_repo),
    reconciler: AssetReconciler = Depends(get_reconciler),
):
    if image is None or not image.filename:
        raise ValidationError("Image is required")
    asset = UploadedAsset.from_upload(image)

    data = {
        "fullName": fullName,
        "quote": quote,
        "description": description,
        "imageUrl": asset.filename,
    }
    repo.validate(data)
    data["imageUrl"] = reconciler.upload_all([asset])[0]
    return _response(repo.insert(data))


@router.get("/{partner_id}", response_model=PartnerResponse)
def get_partner(
    partner_id: str, repo: Repository[Partner] = Depends(get_partner_repo)
):
    return _response(repo.find_by_id(partner_id))


@router.put(
    "/{partner_id}",
    response_model=PartnerResponse,
    dependencies=[Depends(require_admin)],
)
@router.put(
    "/editPartner/{partner_id}",
    response_model=PartnerResponse,
    dependencies=[Depends(require_admin)],
    include_in_schema=False,
)
def update_partner(
    partner_id: str,
    fullName: Optional[str] = Form(None),
    quote: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    repo: Repository[Partner] = Depends(get_partner_repo),
    reconciler: AssetReconciler = Depends(get_reconciler),
):
    """
    Partial update. A new image replaces the stored one; without one the
    current image is kept.
    """
    existing = repo.find_by_id(partner_id)
    changes = {
        key: value
        for key, value in (
            ("fullName", fullName),
            ("quote", quote),
            ("description", description),
        )
        if value is not None
    }
    if image is not None and image.filename:
        asset = UploadedAsset.from_upload(image)
        changes["imageUrl"] = reconciler.replace_single(existing.image_url, asset)
    return _response(repo.update_by_id(partner_id, changes))


@router.delete(
    "/{partner_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
@router.delete(
    "/deletePartner/{partner_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
    include_in_schema=False,
)
def delete_partner(
    partner_id: str,
    repo: Repository[Partner] = Depends(get_partner_repo),
    reconciler: AssetReconciler = Depends(get_reconciler),
):
    partner = repo.find_by_id(partner_id)
    reconciler.remove_all([partner.image_url])
    repo.delete_by_id(partner_id)
    return MessageResponse(message="Partner and associated image deleted successfully")
