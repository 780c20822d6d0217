import logging
import uuid
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel import select, Session

from core.exceptions import BadRequestError, ConflictError, NotFoundError
from models.floors import Floor
from models.restaurant_tables import RestaurantTable, TableStatus
from schemas.tables import TableCreate, TableUpdate

logger = logging.getLogger(__name__)

TABLE_NAME_MAX_LENGTH = 100


def _ensure_unique_name(
    db: Session,
    name: str,
    restaurant_id: uuid.UUID,
    exclude_id: uuid.UUID | None = None
) -> None:
    query = select(RestaurantTable).where(
        RestaurantTable.restaurant_id == restaurant_id,
        RestaurantTable.name == name
    )
    if exclude_id:
        query = query.where(RestaurantTable.id != exclude_id)
    if db.exec(query).first():
        raise ConflictError(f"Table with name '{name}' already exists in this restaurant")


def _ensure_floor(db: Session, floor_id: uuid.UUID, restaurant_id: uuid.UUID) -> None:
    floor = db.get(Floor, floor_id)
    if not floor or floor.restaurant_id != restaurant_id:
        raise NotFoundError("Floor not found")


def create_table(
    db: Session,
    table_data: TableCreate,
    restaurant_id: uuid.UUID
) -> RestaurantTable:
    """Create a new table in a restaurant."""
    _ensure_unique_name(db, table_data.name, restaurant_id)
    if table_data.floor_id:
        _ensure_floor(db, table_data.floor_id, restaurant_id)

    table = RestaurantTable(
        restaurant_id=restaurant_id,
        **table_data.model_dump()
    )
    db.add(table)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Table with name '{table_data.name}' already exists in this restaurant")
    db.refresh(table)
    return table


def list_tables(
    db: Session,
    restaurant_id: uuid.UUID,
    floor_id: uuid.UUID | None = None
) -> list[RestaurantTable]:
    """List tables for a restaurant, oldest first."""
    query = select(RestaurantTable).where(RestaurantTable.restaurant_id == restaurant_id)
    if floor_id:
        query = query.where(RestaurantTable.floor_id == floor_id)
    query = query.order_by(RestaurantTable.created_at.asc())
    return list(db.exec(query).all())


def get_table(
    db: Session,
    table_id: uuid.UUID,
    restaurant_id: uuid.UUID
) -> RestaurantTable:
    """Get a table by ID scoped to its restaurant."""
    table = db.exec(
        select(RestaurantTable).where(
            RestaurantTable.id == table_id,
            RestaurantTable.restaurant_id == restaurant_id
        )
    ).first()
    if not table:
        raise NotFoundError("Table not found")
    return table


def _save(db: Session, table: RestaurantTable) -> RestaurantTable:
    db.add(table)
    try:
        db.commit()
    except StaleDataError:
        # Row deleted between our read and this write
        db.rollback()
        raise NotFoundError("Table not found")
    db.refresh(table)
    return table


def update_table(
    db: Session,
    table_id: uuid.UUID,
    table_data: TableUpdate,
    restaurant_id: uuid.UUID
) -> RestaurantTable:
    """Update editable table fields."""
    table = get_table(db, table_id, restaurant_id)
    updates = table_data.model_dump(exclude_unset=True)

    if updates.get("name") and updates["name"] != table.name:
        _ensure_unique_name(db, updates["name"], restaurant_id, exclude_id=table.id)
    if updates.get("floor_id"):
        _ensure_floor(db, updates["floor_id"], restaurant_id)

    for key, value in updates.items():
        setattr(table, key, value)

    try:
        return _save(db, table)
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Table with name '{updates.get('name')}' already exists in this restaurant")


def update_table_position(
    db: Session,
    table_id: uuid.UUID,
    x: float,
    y: float,
    restaurant_id: uuid.UUID
) -> RestaurantTable:
    """Move a table on the floor plan."""
    table = get_table(db, table_id, restaurant_id)
    table.x = x
    table.y = y
    return _save(db, table)


def update_table_status(
    db: Session,
    table_id: uuid.UUID,
    status: TableStatus,
    restaurant_id: uuid.UUID
) -> RestaurantTable:
    """Set a table's status. Any status may follow any other."""
    table = get_table(db, table_id, restaurant_id)
    table.status = status
    return _save(db, table)


def delete_table(
    db: Session,
    table_id: uuid.UUID,
    restaurant_id: uuid.UUID
) -> None:
    """Hard-delete a table.

    Composites are only removed through unmerge. Deleting a hidden component
    leaves its composite pointing at an id that no longer exists.
    """
    table = get_table(db, table_id, restaurant_id)

    if table.is_merged:
        raise BadRequestError("Cannot delete a merged table. Unmerge it first.")
    if table.parent_table_id:
        logger.warning(
            f"Deleting table {table.id} which is a component of merged table {table.parent_table_id}"
        )

    db.delete(table)
    db.commit()


def merge_tables(
    db: Session,
    table_ids: list[uuid.UUID],
    restaurant_id: uuid.UUID
) -> RestaurantTable:
    """Merge two or more tables into a new composite table.

    The first id in ``table_ids`` supplies the composite's name, color and
    floor. Inputs are hidden and linked to the composite.
    """
    ids = list(dict.fromkeys(table_ids))
    if len(ids) < 2:
        raise BadRequestError("At least two tables are required to merge")

    found = db.exec(
        select(RestaurantTable).where(
            RestaurantTable.id.in_(ids),
            RestaurantTable.restaurant_id == restaurant_id
        )
    ).all()
    if len(found) != len(ids):
        raise NotFoundError("One or more tables not found")

    by_id = {table.id: table for table in found}
    tables = [by_id[table_id] for table_id in ids]

    for table in tables:
        if table.parent_table_id or table.merged_table_ids:
            raise BadRequestError(f"Table '{table.name}' is already part of a merged table")

    first = tables[0]
    composite = RestaurantTable(
        restaurant_id=restaurant_id,
        floor_id=first.floor_id,
        name=f"Merged Table {first.name}"[:TABLE_NAME_MAX_LENGTH],
        capacity=sum(table.capacity for table in tables),
        x=min(table.x for table in tables),
        y=min(table.y for table in tables),
        status=TableStatus.AVAILABLE,
        color=first.color,
        is_merged=True,
        merged_table_ids=[str(table_id) for table_id in ids],
    )

    try:
        db.add(composite)
        db.flush()  # Flush to get composite.id without committing

        for table in tables:
            table.parent_table_id = composite.id
            table.is_hidden = True
            db.add(table)

        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Table with name '{composite.name}' already exists in this restaurant")
    except Exception:
        db.rollback()
        raise

    db.refresh(composite)
    logger.info(f"Merged tables {[str(i) for i in ids]} into {composite.id}")
    return composite


def unmerge_tables(
    db: Session,
    table_id: uuid.UUID,
    restaurant_id: uuid.UUID
) -> list[RestaurantTable]:
    """Dissolve a composite table and restore its components.

    Components come back in merge order. Components deleted
    while merged are skipped.
    """
    composite = get_table(db, table_id, restaurant_id)
    if not composite.is_merged or not composite.merged_table_ids:
        raise BadRequestError("Table is not a merged table")

    component_ids = [uuid.UUID(str(i)) for i in composite.merged_table_ids]
    found = db.exec(
        select(RestaurantTable).where(
            RestaurantTable.id.in_(component_ids),
            RestaurantTable.restaurant_id == restaurant_id
        )
    ).all()
    by_id = {table.id: table for table in found}
    components = [by_id[i] for i in component_ids if i in by_id]

    try:
        for table in components:
            table.parent_table_id = None
            table.is_hidden = False
            db.add(table)

        db.delete(composite)
        db.commit()
    except Exception:
        db.rollback()
        raise

    for table in components:
        db.refresh(table)
    logger.info(f"Unmerged table {table_id} into {len(components)} tables")
    return components
