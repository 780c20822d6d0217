import pytest

from conftest import bearer
from core.exceptions import ForbiddenError
from crud import floors as crud_floors
from crud import tables as crud_tables
from models import FloorType
from schemas.floors import FloorCreate
from schemas.tables import TableCreate


def test_create_floor_normalizes_type(client, restaurant, owner):
    response = client.post(
        f"/api/floors?restaurantId={restaurant.id}",
        json={"name": "Terrace", "type": "outdoor"},
        headers=bearer(owner),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["type"] == "OUTDOOR"
    assert body["color"] == "#000000"
    assert body["restaurant_id"] == str(restaurant.id)


def test_unknown_floor_type_rejected(client, restaurant, owner):
    response = client.post(
        f"/api/floors?restaurantId={restaurant.id}",
        json={"name": "Cellar", "type": "basement"},
        headers=bearer(owner),
    )
    assert response.status_code == 422


def test_duplicate_floor_name_conflicts(client, restaurant, floor, owner):
    response = client.post(
        f"/api/floors?restaurantId={restaurant.id}",
        json={"name": floor.name, "type": "INDOOR"},
        headers=bearer(owner),
    )
    assert response.status_code == 409


def test_list_floors_oldest_first(client, db, restaurant, floor, owner):
    crud_floors.create_floor(db, FloorCreate(name="Upstairs", type=FloorType.INDOOR), restaurant.id)

    response = client.get(f"/api/floors?restaurantId={restaurant.id}", headers=bearer(owner))
    assert [f["name"] for f in response.json()] == ["Main", "Upstairs"]


def test_update_floor(client, restaurant, floor, owner):
    response = client.patch(
        f"/api/floors/{floor.id}?restaurantId={restaurant.id}",
        json={"color": "#ff0000", "type": "rooftop"},
        headers=bearer(owner),
    )
    assert response.status_code == 200
    assert response.json()["color"] == "#ff0000"
    assert response.json()["type"] == "ROOFTOP"
    assert response.json()["name"] == "Main"


def test_only_floor_cannot_be_deleted(db, restaurant, floor):
    with pytest.raises(ForbiddenError):
        crud_floors.delete_floor(db, floor.id, restaurant.id)


def test_delete_floor_detaches_tables(client, db, restaurant, floor, owner):
    spare = crud_floors.create_floor(db, FloorCreate(name="Spare", type=FloorType.INDOOR), restaurant.id)
    table = crud_tables.create_table(db, TableCreate(name="T1", capacity=4, floor_id=floor.id), restaurant.id)

    response = client.delete(f"/api/floors/{floor.id}?restaurantId={restaurant.id}", headers=bearer(owner))
    assert response.status_code == 204

    db.refresh(table)
    assert table.floor_id is None
    remaining = crud_floors.list_floors(db, restaurant.id)
    assert [f.id for f in remaining] == [spare.id]


def test_floor_of_other_restaurant_not_found(client, db, restaurant, other_restaurant, owner):
    theirs = crud_floors.create_floor(db, FloorCreate(name="Theirs", type=FloorType.INDOOR), other_restaurant.id)
    response = client.get(f"/api/floors/{theirs.id}?restaurantId={restaurant.id}", headers=bearer(owner))
    assert response.status_code == 404
