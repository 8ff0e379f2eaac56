"""
Record kinds persisted in the document store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Type


@dataclass
class Project:
    id: str
    title: str
    location: str
    description: str
    images: list[str] = field(default_factory=list)
    year: Optional[int] = None
    video: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "location": self.location,
            "year": self.year,
            "description": self.description,
            "images": list(self.images),
            "video": self.video,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        return cls(
            id=data["id"],
            title=data["title"],
            location=data["location"],
            description=data["description"],
            images=list(data.get("images") or []),
            year=data.get("year"),
            video=data.get("video"),
        )

    def asset_urls(self) -> list[str]:
        return self.images + ([self.video] if self.video else [])


@dataclass
class Partner:
    id: str
    full_name: str
    quote: str
    description: str
    image_url: str

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "fullName": self.full_name,
            "quote": self.quote,
            "description": self.description,
            "imageUrl": self.image_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Partner":
        return cls(
            id=data["id"],
            full_name=data["fullName"],
            quote=data["quote"],
            description=data["description"],
            image_url=data["imageUrl"],
        )


@dataclass
class Stat:
    id: str
    title: str
    description: str

    def as_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict) -> "Stat":
        return cls(id=data["id"], title=data["title"], description=data["description"])


@dataclass
class BoxDescription:
    id: str
    description: str

    def as_dict(self) -> dict:
        return {"id": self.id, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict) -> "BoxDescription":
        return cls(id=data["id"], description=data["description"])


@dataclass
class AdminAccount:
    id: str
    name: str
    email: str
    password: str  # bcrypt hash

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "password": self.password,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AdminAccount":
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            password=data["password"],
        )


@dataclass(frozen=True)
class RecordKind:
    """Where a record kind is stored and which document keys it cannot lack."""

    name: str
    collection: str
    record_type: Type
    required: tuple[str, ...]


PROJECTS = RecordKind(
    name="Project",
    collection="projects",
    record_type=Project,
    required=("title", "location", "description", "images"),
)
PARTNERS = RecordKind(
    name="Partner",
    collection="partners",
    record_type=Partner,
    required=("fullName", "quote", "description", "imageUrl"),
)
STATS = RecordKind(
    name="Stat",
    collection="stats",
    record_type=Stat,
    required=("title", "description"),
)
BOX_DESCRIPTIONS = RecordKind(
    name="Box",
    collection="boxDescription",
    record_type=BoxDescription,
    required=("description",),
)
ADMINS = RecordKind(
    name="Admin",
    collection="admin",
    record_type=AdminAccount,
    required=("name", "email", "password"),
)
