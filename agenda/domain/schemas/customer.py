"""Pydantic schemas for Customer domain."""

from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class CustomerBase(BaseModel):
    documento: str = Field(min_length=1)
    nombre: str = Field(min_length=2)
    apellido: str = Field(min_length=2)
    telefono: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("email", "telefono", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(CustomerBase):
    documento: Optional[str] = Field(default=None, min_length=1)
    nombre: Optional[str] = Field(default=None, min_length=2)
    apellido: Optional[str] = Field(default=None, min_length=2)


class CustomerUpdateRequest(BaseModel):
    id: int = Field(gt=0)
    data: CustomerUpdate


class CustomerRead(BaseModel):
    id: int
    documento: str
    nombre: str
    apellido: str
    telefono: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = {"from_attributes": True}


class CustomerFilter(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    search: Optional[str] = None


class DocumentQuery(BaseModel):
    documento: str = Field(min_length=1)
