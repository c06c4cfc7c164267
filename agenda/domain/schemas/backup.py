"""Pydantic schemas for database backups."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BackupCreateRequest(BaseModel):
    label: Optional[str] = Field(default=None, pattern=r"^[A-Za-z0-9_-]{1,40}$")


class BackupNameRequest(BaseModel):
    name: str = Field(pattern=r"^[A-Za-z0-9_.-]+\.backup$")


class BackupRead(BaseModel):
    name: str
    size: int
    created_at: datetime


class AutoBackupRequest(BaseModel):
    enabled: bool
