import uuid
from sqlalchemy import func
from sqlmodel import select, Session

from core.exceptions import ConflictError, ForbiddenError, NotFoundError
from models.floors import Floor
from models.restaurant_tables import RestaurantTable
from schemas.floors import FloorCreate, FloorUpdate


def _ensure_unique_name(
    db: Session,
    name: str,
    restaurant_id: uuid.UUID,
    exclude_id: uuid.UUID | None = None
) -> None:
    query = select(Floor).where(Floor.restaurant_id == restaurant_id, Floor.name == name)
    if exclude_id:
        query = query.where(Floor.id != exclude_id)
    if db.exec(query).first():
        raise ConflictError(f"Floor with name '{name}' already exists in this restaurant")


def create_floor(db: Session, floor_data: FloorCreate, restaurant_id: uuid.UUID) -> Floor:
    """Create a floor."""
    _ensure_unique_name(db, floor_data.name, restaurant_id)
    floor = Floor(
        name=floor_data.name,
        type=floor_data.type,
        restaurant_id=restaurant_id
    )
    if floor_data.color:
        floor.color = floor_data.color
    db.add(floor)
    db.commit()
    db.refresh(floor)
    return floor


def list_floors(db: Session, restaurant_id: uuid.UUID) -> list[Floor]:
    """List floors for a restaurant, oldest first."""
    query = (
        select(Floor)
        .where(Floor.restaurant_id == restaurant_id)
        .order_by(Floor.created_at.asc())
    )
    return list(db.exec(query).all())


def get_floor(db: Session, floor_id: uuid.UUID, restaurant_id: uuid.UUID) -> Floor:
    """Get a floor scoped to its restaurant."""
    floor = db.exec(
        select(Floor).where(Floor.id == floor_id, Floor.restaurant_id == restaurant_id)
    ).first()
    if not floor:
        raise NotFoundError("Floor not found")
    return floor


def update_floor(
    db: Session,
    floor_id: uuid.UUID,
    floor_data: FloorUpdate,
    restaurant_id: uuid.UUID
) -> Floor:
    """Update a floor."""
    floor = get_floor(db, floor_id, restaurant_id)
    updates = floor_data.model_dump(exclude_unset=True)
    if updates.get("name") and updates["name"] != floor.name:
        _ensure_unique_name(db, updates["name"], restaurant_id, exclude_id=floor.id)

    for key, value in updates.items():
        if value is not None:
            setattr(floor, key, value)
    db.add(floor)
    db.commit()
    db.refresh(floor)
    return floor


def delete_floor(db: Session, floor_id: uuid.UUID, restaurant_id: uuid.UUID) -> None:
    """Delete a floor, detaching its tables first.

    A restaurant always keeps at least one floor.
    """
    floor = get_floor(db, floor_id, restaurant_id)

    floor_count = db.exec(
        select(func.count()).select_from(Floor).where(Floor.restaurant_id == restaurant_id)
    ).one()
    if floor_count <= 1:
        raise ForbiddenError("Cannot delete the only floor of a restaurant")

    try:
        tables = db.exec(
            select(RestaurantTable).where(RestaurantTable.floor_id == floor.id)
        ).all()
        for table in tables:
            table.floor_id = None
            db.add(table)
        db.flush()

        db.delete(floor)
        db.commit()
    except Exception:
        db.rollback()
        raise
