"""Pydantic schemas for key/value settings."""

from typing import Union

from pydantic import BaseModel, Field, RootModel

SettingValue = Union[bool, int, float, str]


def coerce_setting_value(value: SettingValue) -> str:
    """Everything is stored as text; booleans as 'true'/'false'."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SetSettingRequest(BaseModel):
    key: str = Field(min_length=1)
    value: SettingValue


class SetManyRequest(RootModel[dict[str, SettingValue]]):
    pass
