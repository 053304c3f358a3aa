"""Pydantic schemas for the client key admin API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ClientKeyCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Human label for the client")
    note: Optional[str] = None


class ClientKeyUpdate(BaseModel):
    """Partial update; unset fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=1)
    isActive: Optional[bool] = None
    note: Optional[str] = None


class ClientKeyRecord(BaseModel):
    """A client key as persisted and returned by the admin API."""

    id: int
    key: str
    name: str
    isActive: bool = True
    revokedAt: Optional[datetime] = None
    note: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime
