"""Pydantic schemas for users, roles and the login session."""

from typing import Optional

from pydantic import BaseModel, Field


class SessionContext(BaseModel):
    """Identity of the authenticated caller, passed explicitly into gated operations.

    Holds only the user id and level; the role row behind the level is re-read
    on every permission check.
    """
    user_id: int
    level: int

    model_config = {"frozen": True}


class LoginRequest(BaseModel):
    usuario: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserCreate(BaseModel):
    nombre: str = Field(min_length=2)
    apellido: str = Field(min_length=2)
    usuario: str = Field(min_length=3)
    password: str = Field(min_length=6)
    level: int = Field(ge=1)


class UserUpdate(BaseModel):
    nombre: Optional[str] = Field(default=None, min_length=2)
    apellido: Optional[str] = Field(default=None, min_length=2)
    usuario: Optional[str] = Field(default=None, min_length=3)
    level: Optional[int] = Field(default=None, ge=1)


class UserUpdateRequest(BaseModel):
    id: int = Field(gt=0)
    data: UserUpdate


class ChangePasswordRequest(BaseModel):
    id: int = Field(gt=0)
    current_password: str = Field(min_length=1, alias="currentPassword")
    new_password: str = Field(min_length=6, alias="newPassword")

    model_config = {"populate_by_name": True}


class UserRead(BaseModel):
    id: int
    nombre: str
    apellido: str
    usuario: str
    level: int
    last_login: Optional[str] = None
    created_at: Optional[str] = None

    model_config = {"from_attributes": True}


class RoleRead(BaseModel):
    id: int
    label: str
    permissions: list[str]


class RoleUpdate(BaseModel):
    id: int = Field(gt=0)
    label: str = Field(min_length=1)
    permissions: list[str]
