import uuid
from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field

from models.restaurant_tables import TableStatus


class TableCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    capacity: int = Field(..., ge=1)
    x: float = 0
    y: float = 0
    status: TableStatus = TableStatus.AVAILABLE
    color: Optional[str] = Field(None, max_length=20)
    floor_id: Optional[uuid.UUID] = None


class TableUpdate(BaseModel):
    """Client-editable fields. Merge bookkeeping is owned by merge/unmerge."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    capacity: Optional[int] = Field(None, ge=1)
    x: Optional[float] = None
    y: Optional[float] = None
    status: Optional[TableStatus] = None
    color: Optional[str] = Field(None, max_length=20)
    floor_id: Optional[uuid.UUID] = None


class TablePositionUpdate(BaseModel):
    x: float
    y: float


class TableStatusUpdate(BaseModel):
    status: TableStatus


class MergeTablesRequest(BaseModel):
    # Ordered: the first id supplies the composite's name, color and floor
    table_ids: list[uuid.UUID] = Field(
        ...,
        validation_alias=AliasChoices("table_ids", "tableIds"),
    )


class TableResponse(BaseModel):
    id: uuid.UUID
    restaurant_id: uuid.UUID
    floor_id: Optional[uuid.UUID]
    name: str
    capacity: int
    x: float
    y: float
    status: TableStatus
    color: Optional[str]
    is_merged: bool
    merged_table_ids: list[uuid.UUID]
    parent_table_id: Optional[uuid.UUID]
    is_hidden: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
