"""Pydantic schemas for the services catalog."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ServiceName(BaseModel):
    nombre: str = Field(min_length=2, max_length=50)

    @field_validator("nombre", mode="before")
    @classmethod
    def strip_and_check(cls, v):
        if isinstance(v, str):
            v = v.strip()
            # appointments store service names comma-joined
            if "," in v:
                raise ValueError("El nombre del servicio no puede contener comas")
        return v


class ServiceUpdate(ServiceName):
    id: int = Field(gt=0)


class ServiceRead(BaseModel):
    id: int
    nombre: str
    activo: int
    created_at: Optional[str] = None

    model_config = {"from_attributes": True}
