"""
Document store abstraction over SQLAlchemy and an in-memory test implementation.

Every record kind lives in a named collection of JSON documents. Documents are
returned as plain dicts carrying their server-generated ``id``.
"""

from __future__ import annotations

import copy
import time
import uuid
from typing import Dict, Optional, Protocol

from sqlalchemy import JSON, Column, Float, String, create_engine, select
from sqlalchemy.orm import Session, declarative_base, sessionmaker


class DocumentStore(Protocol):
    """Interface for database access."""

    def find_all(self, collection: str) -> list[dict]:
        ...

    def find_by_id(self, collection: str, doc_id: str) -> Optional[dict]:
        ...

    def find_one(
        self, collection: str, filter: Optional[dict] = None
    ) -> Optional[dict]:
        ...

    def insert(self, collection: str, data: dict) -> dict:
        ...

    def update_by_id(
        self, collection: str, doc_id: str, changes: dict
    ) -> Optional[dict]:
        ...

    def delete_by_id(self, collection: str, doc_id: str) -> Optional[dict]:
        ...


def _new_id() -> str:
    return uuid.uuid4().hex


def _matches(data: dict, filter: Optional[dict]) -> bool:
    if not filter:
        return True
    return all(data.get(key) == value for key, value in filter.items())


def _with_id(doc_id: str, data: dict) -> dict:
    return {"id": doc_id, **copy.deepcopy(data)}


class InMemoryDocumentStore:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        # collection -> {id: data}; dicts keep insertion order.
        self.collections: Dict[str, Dict[str, dict]] = {}

    def _collection(self, collection: str) -> Dict[str, dict]:
        return self.collections.setdefault(collection, {})

    def find_all(self, collection: str) -> list[dict]:
        return [
            _with_id(doc_id, data)
            for doc_id, data in self._collection(collection).items()
        ]

    def find_by_id(self, collection: str, doc_id: str) -> Optional[dict]:
        data = self._collection(collection).get(doc_id)
        return _with_id(doc_id, data) if data is not None else None

    def find_one(
        self, collection: str, filter: Optional[dict] = None
    ) -> Optional[dict]:
        for doc_id, data in self._collection(collection).items():
            if _matches(data, filter):
                return _with_id(doc_id, data)
        return None

    def insert(self, collection: str, data: dict) -> dict:
        doc_id = _new_id()
        self._collection(collection)[doc_id] = copy.deepcopy(data)
        return _with_id(doc_id, data)

    def update_by_id(
        self, collection: str, doc_id: str, changes: dict
    ) -> Optional[dict]:
        data = self._collection(collection).get(doc_id)
        if data is None:
            return None
        data.update(copy.deepcopy(changes))
        return _with_id(doc_id, data)

    def delete_by_id(self, collection: str, doc_id: str) -> Optional[dict]:
        data = self._collection(collection).pop(doc_id, None)
        return _with_id(doc_id, data) if data is not None else None

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.collections.clear()


class SqlDocumentStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDocumentStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _query(self, collection: str):
        return (
            select(DocumentRow)
            .where(DocumentRow.collection == collection)
            .order_by(DocumentRow.created_at.asc())
        )

    def find_all(self, collection: str) -> list[dict]:
        with self.Session() as session:
            rows = session.execute(self._query(collection)).scalars().all()
            return [_with_id(row.id, row.data) for row in rows]

    def find_by_id(self, collection: str, doc_id: str) -> Optional[dict]:
        with self.Session() as session:
            row = session.get(DocumentRow, doc_id)
            if not row or row.collection != collection:
                return None
            return _with_id(row.id, row.data)

    def find_one(
        self, collection: str, filter: Optional[dict] = None
    ) -> Optional[dict]:
        # JSON filtering is not portable across backends; collections are small.
        with self.Session() as session:
            for row in session.execute(self._query(collection)).scalars():
                if _matches(row.data, filter):
                    return _with_id(row.id, row.data)
        return None

    def insert(self, collection: str, data: dict) -> dict:
        doc_id = _new_id()
        with self.Session() as session:
            session.add(
                DocumentRow(
                    id=doc_id,
                    collection=collection,
                    data=copy.deepcopy(data),
                    created_at=time.time(),
                )
            )
            session.commit()
        return _with_id(doc_id, data)

    def update_by_id(
        self, collection: str, doc_id: str, changes: dict
    ) -> Optional[dict]:
        with self.Session() as session:
            row = session.get(DocumentRow, doc_id)
            if not row or row.collection != collection:
                return None
            # Reassign so SQLAlchemy sees the JSON column as dirty.
            row.data = {**row.data, **copy.deepcopy(changes)}
            session.commit()
            return _with_id(row.id, row.data)

    def delete_by_id(self, collection: str, doc_id: str) -> Optional[dict]:
        with self.Session() as session:
            row = session.get(DocumentRow, doc_id)
            if not row or row.collection != collection:
                return None
            deleted = _with_id(row.id, row.data)
            session.delete(row)
            session.commit()
            return deleted


Base = declarative_base()


class DocumentRow(Base):
    __tablename__ = "documents"

    id = Column(String, primary_key=True)
    collection = Column(String, nullable=False, index=True)
    data = Column(JSON, nullable=False)
    created_at = Column(Float, nullable=False)
