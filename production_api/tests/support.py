"""
Shared setup for API tests: in-memory backends and admin credentials.
"""

import os
from datetime import datetime, timedelta, timezone

os.environ.update(
    {
        "USE_IN_MEMORY_BACKENDS": "true",
        "BUCKET_NAME": "site-bucket",
        "BUCKET_REGION": "eu-west-3",
        "JWT_SECRET": "test-secret",
        "EMAIL_RECIPIENT": "studio@example.com",
    }
)

from fastapi.testclient import TestClient
from jose import jwt

from production_api.app import create_app
from production_api.auth import create_access_token, create_refresh_token
from production_api.config import get_settings
from production_api.dependencies import (
    get_document_store,
    get_mailer,
    get_storage_client,
    reset_backends,
)

BUCKET_URL = "https://site-bucket.s3.eu-west-3.amazonaws.com"


def make_client(**kwargs) -> TestClient:
    get_settings.cache_clear()
    reset_backends()
    return TestClient(create_app(), **kwargs)


def storage():
    return get_storage_client()


def store():
    return get_document_store()


def mailer():
    return get_mailer()


def admin_headers(admin_id: str = "admin-1") -> dict:
    return {"authorization": f"Bearer {create_access_token(admin_id, 'admin@example.com')}"}


def refresh_token(admin_id: str = "admin-1") -> str:
    return create_refresh_token(admin_id, "admin@example.com")


def expired_token(admin_id: str = "admin-1", token_type: str = "access") -> str:
    settings = get_settings()
    return jwt.encode(
        {
            "userId": admin_id,
            "type": token_type,
            "exp": datetime.now(timezone.utc) - timedelta(minutes=5),
        },
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def image(name: str, data: bytes = b"img", content_type: str = "image/jpeg"):
    return (name, data, content_type)
