"""Pydantic schemas for Shift (appointment) domain and calendar load queries.

Service names are stored on the appointment as one comma-joined string
(compatible with existing databases). join_services/split_services are the
only places that representation is produced or read.
"""

import re
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, computed_field, field_validator, model_validator

SERVICE_SEPARATOR = ", "
DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

Estado = Literal["pendiente", "completado", "cancelado", "ausente"]


def join_services(names: list[str]) -> str:
    return SERVICE_SEPARATOR.join(n.strip() for n in names if n and n.strip())


def split_services(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _check_fecha(v: str) -> str:
    if not DATE_RE.fullmatch(v):
        raise ValueError("La fecha debe tener formato YYYY-MM-DD")
    try:
        date.fromisoformat(v)
    except ValueError:
        raise ValueError(f"Fecha inexistente: {v}")
    return v


class NewCustomerData(BaseModel):
    nombre: str = Field(min_length=2)
    apellido: str = Field(min_length=2)
    telefono: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("email", "telefono", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ShiftCreate(BaseModel):
    fecha: str
    hora: str = Field(pattern=r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
    servicios: list[str] = Field(min_length=1)
    cliente: Optional[str] = None
    profesional: Optional[str] = None
    customer_id: Optional[int] = Field(default=None, gt=0, alias="customerId")
    documento: Optional[str] = None
    nuevo_cliente: Optional[NewCustomerData] = Field(default=None, alias="nuevoCliente")

    model_config = {"populate_by_name": True}

    @field_validator("fecha")
    @classmethod
    def check_fecha(cls, v: str) -> str:
        return _check_fecha(v)

    @field_validator("hora")
    @classmethod
    def pad_hora(cls, v: str) -> str:
        hours, minutes = v.split(":")
        return f"{int(hours):02d}:{minutes}"

    @field_validator("servicios", mode="before")
    @classmethod
    def accept_joined(cls, v):
        if isinstance(v, str):
            return split_services(v)
        return v

    @field_validator("documento", "cliente", "profesional")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v

    @model_validator(mode="after")
    def require_customer_reference(self):
        if not (self.customer_id or self.documento or self.cliente):
            raise ValueError("Debe indicar el cliente del turno")
        if not split_services(join_services(self.servicios)):
            raise ValueError("Debe indicar al menos un servicio")
        return self


class ShiftRead(BaseModel):
    id: int
    fecha: str
    hora: str
    cliente: str
    servicio: str
    profesional: Optional[str] = None
    estado: str
    customer_id: Optional[int] = None
    created_at: Optional[str] = None

    model_config = {"from_attributes": True}

    @computed_field
    @property
    def servicios(self) -> list[str]:
        return split_services(self.servicio)


class DateQuery(BaseModel):
    fecha: str

    @field_validator("fecha")
    @classmethod
    def check_fecha(cls, v: str) -> str:
        return _check_fecha(v)


class MonthlyLoadQuery(BaseModel):
    year: int = Field(ge=2000, le=2100)
    month: int = Field(ge=1, le=12)


class YearlyLoadQuery(BaseModel):
    year: int = Field(ge=2000, le=2100)


class InitialDataQuery(MonthlyLoadQuery):
    date: str

    @field_validator("date")
    @classmethod
    def check_date(cls, v: str) -> str:
        return _check_fecha(v)


class UpdateStatusRequest(BaseModel):
    id: int = Field(gt=0)
    estado: Estado
