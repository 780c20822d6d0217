import uuid
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Query

from api.deps import SessionDep, RestaurantDep
from api.websocket.table_layout import broadcast_table_event
from crud import tables as crud_tables
from schemas.tables import (
    TableCreate,
    TableUpdate,
    TablePositionUpdate,
    TableStatusUpdate,
    MergeTablesRequest,
    TableResponse,
)
from schemas.websocket import (
    TableCreatedMessage,
    TableUpdatedMessage,
    TableDeletedMessage,
    TablesMergedMessage,
    TablesUnmergedMessage,
)

router = APIRouter(prefix="/tables", tags=["tables"])


def _updated(background_tasks: BackgroundTasks, table) -> TableResponse:
    response = TableResponse.model_validate(table)
    background_tasks.add_task(
        broadcast_table_event, response.restaurant_id, TableUpdatedMessage(table=response)
    )
    return response


@router.post("", response_model=TableResponse, status_code=201)
def create_table(
    table_data: TableCreate,
    restaurant: RestaurantDep,
    db: SessionDep,
    background_tasks: BackgroundTasks
):
    """Create a table."""
    table = crud_tables.create_table(db, table_data, restaurant.id)
    response = TableResponse.model_validate(table)
    background_tasks.add_task(broadcast_table_event, restaurant.id, TableCreatedMessage(table=response))
    return response


@router.get("", response_model=list[TableResponse])
def list_tables(
    restaurant: RestaurantDep,
    db: SessionDep,
    floor_id: Optional[uuid.UUID] = Query(None, alias="floorId")
):
    """List a restaurant's tables, optionally for one floor."""
    return crud_tables.list_tables(db, restaurant.id, floor_id)


@router.post("/merge", response_model=TableResponse, status_code=201)
def merge_tables(
    merge_data: MergeTablesRequest,
    restaurant: RestaurantDep,
    db: SessionDep,
    background_tasks: BackgroundTasks
):
    """Merge tables into a composite table."""
    composite = crud_tables.merge_tables(db, merge_data.table_ids, restaurant.id)
    response = TableResponse.model_validate(composite)
    background_tasks.add_task(
        broadcast_table_event,
        restaurant.id,
        TablesMergedMessage(table=response, merged_table_ids=response.merged_table_ids),
    )
    return response


@router.get("/{table_id}", response_model=TableResponse)
def get_table(table_id: uuid.UUID, restaurant: RestaurantDep, db: SessionDep):
    """Get table details."""
    return crud_tables.get_table(db, table_id, restaurant.id)


@router.patch("/{table_id}", response_model=TableResponse)
def update_table(
    table_id: uuid.UUID,
    table_data: TableUpdate,
    restaurant: RestaurantDep,
    db: SessionDep,
    background_tasks: BackgroundTasks
):
    """Update a table."""
    table = crud_tables.update_table(db, table_id, table_data, restaurant.id)
    return _updated(background_tasks, table)


@router.patch("/{table_id}/position", response_model=TableResponse)
def update_table_position(
    table_id: uuid.UUID,
    position: TablePositionUpdate,
    restaurant: RestaurantDep,
    db: SessionDep,
    background_tasks: BackgroundTasks
):
    """Move a table on the floor plan."""
    table = crud_tables.update_table_position(db, table_id, position.x, position.y, restaurant.id)
    return _updated(background_tasks, table)


@router.patch("/{table_id}/status", response_model=TableResponse)
def update_table_status(
    table_id: uuid.UUID,
    status_data: TableStatusUpdate,
    restaurant: RestaurantDep,
    db: SessionDep,
    background_tasks: BackgroundTasks
):
    """Set a table's status."""
    table = crud_tables.update_table_status(db, table_id, status_data.status, restaurant.id)
    return _updated(background_tasks, table)


@router.delete("/{table_id}", status_code=204)
def delete_table(
    table_id: uuid.UUID,
    restaurant: RestaurantDep,
    db: SessionDep,
    background_tasks: BackgroundTasks
):
    """Delete a table."""
    crud_tables.delete_table(db, table_id, restaurant.id)
    background_tasks.add_task(broadcast_table_event, restaurant.id, TableDeletedMessage(table_id=table_id))
    return None


@router.post("/{table_id}/unmerge", response_model=list[TableResponse])
def unmerge_tables(
    table_id: uuid.UUID,
    restaurant: RestaurantDep,
    db: SessionDep,
    background_tasks: BackgroundTasks
):
    """Split a composite table back into its components."""
    tables = crud_tables.unmerge_tables(db, table_id, restaurant.id)
    response = [TableResponse.model_validate(table) for table in tables]
    background_tasks.add_task(
        broadcast_table_event, restaurant.id, TablesUnmergedMessage(table_id=table_id, tables=response)
    )
    return response
