"""Pydantic schemas for the Storage API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class StoredFileRecord(BaseModel):
    """A stored file as returned by the API. Every field is derived from the filesystem."""

    storedName: str = Field(..., description="Physical filename on disk")
    originalName: str = Field(..., description="Name the file was uploaded with")
    size: int
    mimeType: str
    category: str = Field(..., description="Content category used for statistics")
    owner: Optional[str] = None
    relativePath: str = Field(..., description="storedName or owner/storedName")
    uploadedAt: datetime
    downloadUrl: str
    publicUrl: str


class FileTypeStats(BaseModel):
    count: int = 0
    totalSize: int = 0
    percentage: float = 0.0


class FileStatistics(BaseModel):
    """Aggregate usage of a client namespace, recomputed on every request."""

    totalFiles: int = 0
    totalSize: int = 0
    fileTypes: dict[str, FileTypeStats] = Field(default_factory=dict)
    sizeBreakdown: dict[str, int] = Field(default_factory=dict)


class DeleteResponse(BaseModel):
    success: bool = True
