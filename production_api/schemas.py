"""
Pydantic schemas for the site API.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class MessageResponse(BaseModel):
    message: str


class ProjectResponse(BaseModel):
    id: str
    title: str
    location: str
    year: Optional[int] = None
    description: str
    images: list[str]
    video: Optional[str] = None


class PartnerResponse(BaseModel):
    id: str
    fullName: str
    quote: str
    description: str
    imageUrl: str


class StatResponse(BaseModel):
    id: str
    title: str
    description: str


class StatCreate(BaseModel):
    title: str
    description: str


class StatUpdate(BaseModel):
    """Partial update: only fields sent by the client are applied."""

    title: Optional[str] = None
    description: Optional[str] = None


class BoxResponse(BaseModel):
    id: str
    description: str


class BoxPayload(BaseModel):
    description: str = Field(..., min_length=1)


class AdminResponse(BaseModel):
    id: str
    name: str
    email: str


class AdminCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("email", "username")
    )
    password: Optional[str] = None


class LoginResponse(BaseModel):
    message: str
    accessToken: str
    refreshToken: str
    admin: AdminResponse


class EmailRequest(BaseModel):
    senderEmail: Optional[str] = None
    senderPassword: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


class StoredFileResponse(BaseModel):
    message: str
    url: Optional[str] = None


class ImageListResponse(BaseModel):
    message: str
    images: list[str]
