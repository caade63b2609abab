from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class SchemaBase(BaseModel):
    model_config = ConfigDict(
        from_attributes=True, extra="ignore", populate_by_name=True, str_strip_whitespace=True
    )


class Envelope(SchemaBase, Generic[T]):
    success: bool = True
    data: T


class MessageOut(SchemaBase):
    success: bool = True
    message: str
