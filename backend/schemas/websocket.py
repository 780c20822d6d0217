from typing import Literal
from pydantic import BaseModel
import uuid

from schemas.tables import TableResponse


# Outgoing table layout events
class TablesSnapshotMessage(BaseModel):
    type: Literal["tables_snapshot"] = "tables_snapshot"
    restaurant_id: uuid.UUID
    tables: list[TableResponse]


class TableCreatedMessage(BaseModel):
    type: Literal["table_created"] = "table_created"
    table: TableResponse


class TableUpdatedMessage(BaseModel):
    type: Literal["table_updated"] = "table_updated"
    table: TableResponse


class TableDeletedMessage(BaseModel):
    type: Literal["table_deleted"] = "table_deleted"
    table_id: uuid.UUID


class TablesMergedMessage(BaseModel):
    type: Literal["tables_merged"] = "tables_merged"
    table: TableResponse  # the new composite
    merged_table_ids: list[uuid.UUID]


class TablesUnmergedMessage(BaseModel):
    type: Literal["tables_unmerged"] = "tables_unmerged"
    table_id: uuid.UUID  # the removed composite
    tables: list[TableResponse]


class PongMessage(BaseModel):
    type: Literal["pong"] = "pong"


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    message: str
