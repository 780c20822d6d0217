import uuid

import pytest

from conftest import bearer
from core.exceptions import BadRequestError, NotFoundError
from crud import tables as crud_tables
from models import RestaurantTable, TableStatus
from schemas.tables import TableCreate


def _table(db, restaurant, name, capacity=2, x=0.0, y=0.0, floor=None, color=None):
    return crud_tables.create_table(
        db,
        TableCreate(name=name, capacity=capacity, x=x, y=y, color=color, floor_id=floor.id if floor else None),
        restaurant.id,
    )


def test_merge_builds_composite(db, restaurant, floor):
    a = _table(db, restaurant, "A", capacity=2, x=50, y=10, floor=floor, color="#111111")
    b = _table(db, restaurant, "B", capacity=4, x=20, y=30, color="#222222")
    c = _table(db, restaurant, "C", capacity=3, x=80, y=5)

    composite = crud_tables.merge_tables(db, [a.id, b.id, c.id], restaurant.id)

    assert composite.name == "Merged Table A"
    assert composite.capacity == 9
    assert (composite.x, composite.y) == (20, 5)
    assert composite.status == TableStatus.AVAILABLE
    assert composite.color == "#111111"
    assert composite.floor_id == floor.id
    assert composite.is_merged is True
    assert composite.is_hidden is False
    assert composite.parent_table_id is None
    assert composite.merged_table_ids == [str(a.id), str(b.id), str(c.id)]

    for table in (a, b, c):
        db.refresh(table)
        assert table.is_hidden is True
        assert table.parent_table_id == composite.id


def test_first_id_controls_cosmetics(db, restaurant):
    a = _table(db, restaurant, "A", color="#aaaaaa")
    b = _table(db, restaurant, "B", color="#bbbbbb")

    composite = crud_tables.merge_tables(db, [b.id, a.id], restaurant.id)

    assert composite.name == "Merged Table B"
    assert composite.color == "#bbbbbb"


def test_merge_needs_two_distinct_tables(db, restaurant):
    a = _table(db, restaurant, "A")

    with pytest.raises(BadRequestError):
        crud_tables.merge_tables(db, [a.id], restaurant.id)
    with pytest.raises(BadRequestError):
        crud_tables.merge_tables(db, [a.id, a.id], restaurant.id)
    with pytest.raises(BadRequestError):
        crud_tables.merge_tables(db, [], restaurant.id)


def test_duplicate_ids_are_collapsed(db, restaurant):
    a = _table(db, restaurant, "A", capacity=2)
    b = _table(db, restaurant, "B", capacity=3)

    composite = crud_tables.merge_tables(db, [a.id, b.id, a.id], restaurant.id)

    assert composite.capacity == 5
    assert composite.merged_table_ids == [str(a.id), str(b.id)]


def test_merge_with_missing_or_foreign_table(db, restaurant, other_restaurant):
    a = _table(db, restaurant, "A")
    theirs = _table(db, other_restaurant, "X")

    with pytest.raises(NotFoundError):
        crud_tables.merge_tables(db, [a.id, uuid.uuid4()], restaurant.id)
    with pytest.raises(NotFoundError):
        crud_tables.merge_tables(db, [a.id, theirs.id], restaurant.id)


def test_cannot_merge_already_merged_tables(db, restaurant):
    a = _table(db, restaurant, "A")
    b = _table(db, restaurant, "B")
    c = _table(db, restaurant, "C")
    composite = crud_tables.merge_tables(db, [a.id, b.id], restaurant.id)

    # Neither a composite nor one of its components may be merged again
    with pytest.raises(BadRequestError):
        crud_tables.merge_tables(db, [composite.id, c.id], restaurant.id)
    with pytest.raises(BadRequestError):
        crud_tables.merge_tables(db, [a.id, c.id], restaurant.id)

    db.refresh(c)
    assert c.is_hidden is False
    assert c.parent_table_id is None


def test_unmerge_restores_components(db, restaurant):
    a = _table(db, restaurant, "A", x=5, y=6)
    b = _table(db, restaurant, "B", x=7, y=8)
    composite = crud_tables.merge_tables(db, [b.id, a.id], restaurant.id)
    composite_id = composite.id

    restored = crud_tables.unmerge_tables(db, composite_id, restaurant.id)

    assert [t.id for t in restored] == [b.id, a.id]
    for table in restored:
        assert table.is_hidden is False
        assert table.parent_table_id is None
    assert (a.x, a.y) == (5, 6)
    assert db.get(RestaurantTable, composite_id) is None


def test_unmerge_rejects_plain_table(db, restaurant):
    a = _table(db, restaurant, "A", x=3, y=4)
    with pytest.raises(BadRequestError):
        crud_tables.unmerge_tables(db, a.id, restaurant.id)

    db.refresh(a)
    assert a.is_hidden is False
    assert a.parent_table_id is None
    assert a.is_merged is False
    assert (a.x, a.y) == (3, 4)
    assert crud_tables.get_table(db, a.id, restaurant.id).id == a.id


def test_unmerge_rejects_composite_without_components(db, restaurant):
    broken = RestaurantTable(restaurant_id=restaurant.id, name="Broken", capacity=2, is_merged=True)
    db.add(broken)
    db.commit()

    with pytest.raises(BadRequestError):
        crud_tables.unmerge_tables(db, broken.id, restaurant.id)
    assert crud_tables.get_table(db, broken.id, restaurant.id).is_merged is True


def test_merged_name_fits_column(db, restaurant):
    a = _table(db, restaurant, "A" * 100)
    b = _table(db, restaurant, "B")

    composite = crud_tables.merge_tables(db, [a.id, b.id], restaurant.id)

    assert len(composite.name) == crud_tables.TABLE_NAME_MAX_LENGTH
    assert composite.name.startswith("Merged Table AAA")


def test_unmerge_unknown_table(db, restaurant):
    with pytest.raises(NotFoundError):
        crud_tables.unmerge_tables(db, uuid.uuid4(), restaurant.id)


def test_composite_cannot_be_deleted(db, restaurant):
    a = _table(db, restaurant, "A")
    b = _table(db, restaurant, "B")
    composite = crud_tables.merge_tables(db, [a.id, b.id], restaurant.id)

    with pytest.raises(BadRequestError):
        crud_tables.delete_table(db, composite.id, restaurant.id)


def test_deleting_hidden_component_leaves_composite(db, restaurant):
    a = _table(db, restaurant, "A")
    b = _table(db, restaurant, "B")
    composite = crud_tables.merge_tables(db, [a.id, b.id], restaurant.id)
    composite_id = composite.id

    crud_tables.delete_table(db, a.id, restaurant.id)

    composite = crud_tables.get_table(db, composite_id, restaurant.id)
    assert composite.merged_table_ids == [str(a.id), str(b.id)]

    # Unmerge skips the component that no longer exists
    restored = crud_tables.unmerge_tables(db, composite_id, restaurant.id)
    assert [t.id for t in restored] == [b.id]


def test_merge_and_unmerge_over_http(client, restaurant, owner):
    headers = bearer(owner)
    ids = [
        client.post(f"/api/tables?restaurantId={restaurant.id}", json={"name": name, "capacity": 2}, headers=headers).json()["id"]
        for name in ("A", "B")
    ]

    # camelCase body is accepted too
    response = client.post(f"/api/tables/merge?restaurantId={restaurant.id}", json={"tableIds": ids}, headers=headers)
    assert response.status_code == 201
    composite = response.json()
    assert composite["is_merged"] is True
    assert composite["merged_table_ids"] == ids

    listed = client.get(f"/api/tables?restaurantId={restaurant.id}", headers=headers).json()
    assert sum(1 for t in listed if t["is_hidden"]) == 2

    response = client.delete(f"/api/tables/{composite['id']}?restaurantId={restaurant.id}", headers=headers)
    assert response.status_code == 400

    response = client.post(f"/api/tables/{composite['id']}/unmerge?restaurantId={restaurant.id}", headers=headers)
    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == ids
    assert all(not t["is_hidden"] for t in response.json())


def test_merge_over_http_requires_permission(client, restaurant, other_user):
    response = client.post(
        f"/api/tables/merge?restaurantId={restaurant.id}",
        json={"table_ids": [str(uuid.uuid4()), str(uuid.uuid4())]},
        headers=bearer(other_user),
    )
    assert response.status_code == 403
