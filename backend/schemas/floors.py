import uuid
from datetime import datetime
from typing import Annotated, Optional
from pydantic import BaseModel, BeforeValidator, Field

from models.floors import FloorType


def _upper(value):
    return value.upper() if isinstance(value, str) else value


# Accepts "indoor", "Indoor", ...
FloorTypeInput = Annotated[FloorType, BeforeValidator(_upper)]


class FloorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: FloorTypeInput
    color: Optional[str] = Field(None, max_length=20)


class FloorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[FloorTypeInput] = None
    color: Optional[str] = Field(None, max_length=20)


class FloorResponse(BaseModel):
    id: uuid.UUID
    name: str
    type: FloorType
    color: str
    restaurant_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
