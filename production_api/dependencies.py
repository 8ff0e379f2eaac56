"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from production_api.assets import AssetReconciler
from production_api.config import get_settings
from production_api.db import DocumentStore, InMemoryDocumentStore, SqlDocumentStore
from production_api.mailer import InMemoryMailer, Mailer, SmtpMailer
from production_api.records import (
    ADMINS,
    BOX_DESCRIPTIONS,
    PARTNERS,
    PROJECTS,
    STATS,
    AdminAccount,
    BoxDescription,
    Partner,
    Project,
    Stat,
)
from production_api.repository import Repository
from production_api.storage import InMemoryStorageClient, S3StorageClient, StorageClient

_document_store: DocumentStore | None = None
_storage_client: StorageClient | None = None
_mailer: Mailer | None = None


def get_document_store() -> DocumentStore:
    """
    Return a singleton store so the connection pool is shared across requests.
    """
    global _document_store
    if _document_store:
        return _document_store

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _document_store = InMemoryDocumentStore()
    else:
        _document_store = SqlDocumentStore(settings.database_url)
    return _document_store


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.bucket_name:
        _storage_client = InMemoryStorageClient(
            bucket=settings.bucket_name or "test-bucket",
            region=settings.bucket_region,
        )
    else:
        _storage_client = S3StorageClient(
            bucket=settings.bucket_name,
            region=settings.bucket_region,
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
            endpoint=settings.s3_endpoint or "",
            max_attempts=settings.storage_max_attempts,
        )
    return _storage_client


def get_mailer() -> Mailer:
    global _mailer
    if _mailer:
        return _mailer

    settings = get_settings()
    if settings.use_in_memory_backends:
        _mailer = InMemoryMailer()
    else:
        _mailer = SmtpMailer(timeout=settings.smtp_timeout_seconds)
    return _mailer


def reset_backends() -> None:
    """Drop the cached singletons (used by tests)."""
    global _document_store, _storage_client, _mailer
    _document_store = None
    _storage_client = None
    _mailer = None


def get_reconciler() -> AssetReconciler:
    return AssetReconciler(
        get_storage_client(), max_workers=get_settings().upload_max_workers
    )


def get_project_repo() -> Repository[Project]:
    return Repository(get_document_store(), PROJECTS)


def get_partner_repo() -> Repository[Partner]:
    return Repository(get_document_store(), PARTNERS)


def get_stat_repo() -> Repository[Stat]:
    return Repository(get_document_store(), STATS)


def get_box_repo() -> Repository[BoxDescription]:
    return Repository(get_document_store(), BOX_DESCRIPTIONS)


def get_admin_repo() -> Repository[AdminAccount]:
    return Repository(get_document_store(), ADMINS)
