"""
Admin account routes: sign-up, login and removal.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from production_api.auth import (
    create_access_token,
    create_refresh_token,
    hash_password,
    require_admin,
    verify_password,
)
from production_api.config import Settings, get_settings
from production_api.dependencies import get_admin_repo
from production_api.errors import AuthError, ValidationError
from production_api.records import AdminAccount
from production_api.repository import Repository
from production_api.schemas import (
    AdminCreate,
    AdminResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _response(admin: AdminAccount) -> AdminResponse:
    return AdminResponse(id=admin.id, name=admin.name, email=admin.email)


@router.get(
    "/getAdmin",
    response_model=list[AdminResponse],
    dependencies=[Depends(require_admin)],
)
def list_admins(repo: Repository[AdminAccount] = Depends(get_admin_repo)):
    return [_response(a) for a in repo.find_all()]


@router.post("/addAdmin", response_model=MessageResponse, status_code=201)
def add_admin(
    payload: AdminCreate, repo: Repository[AdminAccount] = Depends(get_admin_repo)
):
    if not payload.name or not payload.email or not payload.password:
        raise ValidationError("All fields are required")

    email = _normalize_email(payload.email)
    # Uniqueness is a pre-check, not a storage constraint.
    if repo.find_one({"email": email}) is not None:
        raise ValidationError("Admin with this email already exists")

    admin = repo.insert(
        {
            "name": payload.name,
            "email": email,
            "password": hash_password(payload.password),
        }
    )
    logger.info("Added admin %s", admin.id)
    return MessageResponse(message="Admin added successfully")


@router.post("/loginAdmin", response_model=LoginResponse)
def login_admin(
    payload: LoginRequest,
    repo: Repository[AdminAccount] = Depends(get_admin_repo),
    settings: Settings = Depends(get_settings),
):
    if not payload.email or not payload.password:
        raise ValidationError("email and password are required")

    admin = repo.find_one({"email": _normalize_email(payload.email)})
    if admin is None or not verify_password(payload.password, admin.password):
        raise AuthError("Invalid credentials", status_code=401)

    return LoginResponse(
        message="User is an admin",
        accessToken=create_access_token(admin.id, admin.email, settings),
        refreshToken=create_refresh_token(admin.id, admin.email, settings),
        admin=_response(admin),
    )


@router.delete(
    "/{admin_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def delete_admin(
    admin_id: str, repo: Repository[AdminAccount] = Depends(get_admin_repo)
):
    repo.delete_by_id(admin_id)
    return MessageResponse(message="Admin deleted successfully")
