from datetime import datetime, timedelta

from conftest import bearer
from core.config import settings
from crud import allowed_emails as crud_allowed_emails
from crud import users as crud_users
from models import RevokedUser, User


def _add_user(db, uid, email, name=None):
    user = User(external_uid=uid, email=email, name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def test_users_routes_require_admin(client, owner):
    response = client.get("/api/users", headers=bearer(owner))
    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"


def test_list_users_paginates(client, db, admin, owner, other_user):
    _add_user(db, "c-uid", "carol@example.com", "Carol")

    response = client.get("/api/users?page=1&limit=2", headers=bearer(admin))
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["page"] == 1
    assert body["limit"] == 2
    assert len(body["data"]) == 2

    second = client.get("/api/users?page=2&limit=2", headers=bearer(admin)).json()
    assert len(second["data"]) == 1
    seen = {u["email"] for u in body["data"] + second["data"]}
    assert seen == {"owner@example.com", "other@example.com", "carol@example.com"}


def test_list_users_filters(client, db, admin, owner):
    _add_user(db, "c-uid", "carol@example.com", "Carol")
    headers = bearer(admin)

    found = client.get("/api/users?search=CAROL", headers=headers).json()
    assert [u["email"] for u in found["data"]] == ["carol@example.com"]
    assert found["data"][0]["is_allowed"] is False

    allowed = client.get("/api/users?isAllowed=true", headers=headers).json()
    assert [u["email"] for u in allowed["data"]] == ["owner@example.com"]
    assert allowed["data"][0]["is_allowed"] is True

    pending = client.get("/api/users?isAllowed=false", headers=headers).json()
    assert [u["email"] for u in pending["data"]] == ["carol@example.com"]

    admins = client.get("/api/users?role=ADMIN", headers=headers).json()
    assert [u["email"] for u in admins["data"]] == ["admin@example.com"]


def test_update_user_role(client, admin, owner):
    response = client.patch(f"/api/users/{owner.id}", json={"role": "ADMIN"}, headers=bearer(admin))
    assert response.status_code == 200
    assert response.json()["role"] == "ADMIN"


def test_get_unknown_user(client, admin):
    response = client.get("/api/users/00000000-0000-0000-0000-000000000000", headers=bearer(admin))
    assert response.status_code == 404


def test_disallow_revokes_access(client, db, admin, owner):
    response = client.patch(f"/api/users/{owner.id}/allowed", json={"is_allowed": False}, headers=bearer(admin))
    assert response.status_code == 200
    assert response.json()["is_allowed"] is False

    assert not crud_allowed_emails.is_email_allowed(db, owner.email)
    assert crud_users.is_user_revoked(db, owner.external_uid)

    response = client.get("/api/auth/me", headers=bearer(owner))
    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "AUTH_USER_DEACTIVATED"


def test_allow_restores_access(client, db, admin):
    carol = _add_user(db, "c-uid", "carol@example.com", "Carol")
    crud_users.add_user_to_revoked_list(db, carol.external_uid)

    response = client.patch(f"/api/users/{carol.id}/allowed", json={"is_allowed": True}, headers=bearer(admin))
    assert response.status_code == 200
    assert response.json()["is_allowed"] is True

    entry = crud_allowed_emails.get_allowed_email_by_email(db, "carol@example.com")
    assert entry.created_by == "system"
    assert not crud_users.is_user_revoked(db, "c-uid")
    assert client.get("/api/auth/me", headers=bearer(carol)).status_code == 200


def test_allow_is_idempotent(db, owner):
    crud_users.set_user_allowed_status(db, owner.id, True)
    crud_users.set_user_allowed_status(db, owner.id, True)
    assert len(crud_allowed_emails.list_allowed_emails(db)) == 1


def test_revoking_twice_keeps_one_row(db):
    crud_users.add_user_to_revoked_list(db, "x-uid", reason="first")
    crud_users.add_user_to_revoked_list(db, "x-uid", reason="second")
    assert db.get(RevokedUser, "x-uid").reason == "second"


def test_remove_unknown_revocation(db):
    assert crud_users.remove_user_from_revoked_list(db, "nobody") is False


def test_cleanup_revoked_users(db):
    crud_users.add_user_to_revoked_list(db, "fresh-uid")
    stale = crud_users.add_user_to_revoked_list(db, "stale-uid")
    stale.revoked_at = datetime.now(settings.APP_TIMEZONE) - timedelta(hours=48)
    db.add(stale)
    db.commit()

    assert crud_users.cleanup_revoked_users(db, max_age_hours=24) == 1
    assert crud_users.is_user_revoked(db, "fresh-uid")
    assert not crud_users.is_user_revoked(db, "stale-uid")


def test_allowed_emails_admin_crud(client, admin):
    headers = bearer(admin)
    response = client.post("/api/allowed-emails", json={"email": "New@Example.com", "description": "chef"}, headers=headers)
    assert response.status_code == 201
    entry = response.json()
    assert entry["email"] == "new@example.com"
    assert entry["created_by"] == admin.email

    response = client.post("/api/allowed-emails", json={"email": "new@example.com"}, headers=headers)
    assert response.status_code == 409

    response = client.patch(f"/api/allowed-emails/{entry['id']}", json={"description": "sous chef"}, headers=headers)
    assert response.json()["description"] == "sous chef"

    assert client.delete(f"/api/allowed-emails/{entry['id']}", headers=headers).status_code == 204
    assert client.get(f"/api/allowed-emails/{entry['id']}", headers=headers).status_code == 404
