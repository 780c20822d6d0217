import uuid

import pytest

from conftest import bearer
from core.exceptions import ForbiddenError, NotFoundError
from crud.permissions import check_restaurant_permission
from models import Floor, Restaurant


def test_owner_gets_restaurant(db, restaurant, owner):
    assert check_restaurant_permission(db, restaurant.id, owner).id == restaurant.id


def test_admin_bypasses_ownership(db, restaurant, admin):
    assert check_restaurant_permission(db, restaurant.id, admin).id == restaurant.id


def test_other_owner_is_forbidden(db, restaurant, other_user):
    with pytest.raises(ForbiddenError):
        check_restaurant_permission(db, restaurant.id, other_user)


def test_missing_restaurant_is_not_found_even_for_admin(db, admin):
    with pytest.raises(NotFoundError):
        check_restaurant_permission(db, uuid.uuid4(), admin)


def test_scoped_routes_enforce_ownership(client, restaurant, other_user):
    response = client.get(f"/api/floors?restaurantId={restaurant.id}", headers=bearer(other_user))
    assert response.status_code == 403

    response = client.get(f"/api/floors?restaurantId={uuid.uuid4()}", headers=bearer(other_user))
    assert response.status_code == 404
    assert response.json() == {"detail": "Restaurant not found"}


def test_restaurant_listing_is_per_owner(client, restaurant, other_restaurant, owner, admin):
    mine = client.get("/api/restaurants", headers=bearer(owner)).json()
    assert [r["id"] for r in mine] == [str(restaurant.id)]

    everything = client.get("/api/restaurants", headers=bearer(admin)).json()
    assert {r["id"] for r in everything} == {str(restaurant.id), str(other_restaurant.id)}

    # /mine is ownership only, even for admins
    assert client.get("/api/restaurants/mine", headers=bearer(admin)).json() == []


def test_create_restaurant_sets_owner(client, owner):
    response = client.post(
        "/api/restaurants",
        json={"name": "New Place", "address": "3 Road", "phone": "+9611234567", "email": "new@example.com"},
        headers=bearer(owner),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["owner_id"] == str(owner.id)
    assert body["sms_enabled"] is False


def test_create_restaurant_validates_email(client, owner):
    response = client.post(
        "/api/restaurants",
        json={"name": "New Place", "address": "3 Road", "phone": "+9611234567", "email": "not-an-email"},
        headers=bearer(owner),
    )
    assert response.status_code == 422


def test_update_and_delete_other_restaurant_forbidden(client, other_restaurant, owner):
    headers = bearer(owner)
    response = client.patch(f"/api/restaurants/{other_restaurant.id}", json={"name": "Mine now"}, headers=headers)
    assert response.status_code == 403
    response = client.delete(f"/api/restaurants/{other_restaurant.id}", headers=headers)
    assert response.status_code == 403


def test_delete_restaurant_removes_children(client, db, restaurant, floor, owner):
    restaurant_id, floor_id = restaurant.id, floor.id
    response = client.delete(f"/api/restaurants/{restaurant_id}", headers=bearer(owner))
    assert response.status_code == 204

    db.expire_all()
    assert db.get(Restaurant, restaurant_id) is None
    assert db.get(Floor, floor_id) is None
