"""Tests for admin user management."""
import uuid

from conftest import API, auth_headers, login, make_admin, register

ADMIN = f"{API}/admin/users"


def admin_token(client, session_factory):
    register(client, "root@example.com", name="Root")
    make_admin(session_factory, "root@example.com")
    return login(client, "root@example.com")


class TestAdminGuard:
    def test_developer_forbidden(self, client, developer):
        assert client.get(ADMIN, headers=auth_headers(developer[1])).status_code == 403

    def test_role_read_from_store_not_token(self, client, session_factory, developer):
        _, token = developer
        make_admin(session_factory, "dev@example.com")
        assert client.get(ADMIN, headers=auth_headers(token)).status_code == 200


class TestUserManagement:
    def test_list_and_get(self, client, session_factory, developer):
        token = admin_token(client, session_factory)
        listed = client.get(ADMIN, headers=auth_headers(token)).json()
        assert {u["email"] for u in listed} == {"dev@example.com", "root@example.com"}

        resp = client.get(f"{ADMIN}/{developer[0]['id']}", headers=auth_headers(token))
        assert resp.status_code == 200
        assert resp.json()["email"] == "dev@example.com"

        assert client.get(f"{ADMIN}/{uuid.uuid4()}", headers=auth_headers(token)).status_code == 404

    def test_promote(self, client, session_factory, developer):
        token = admin_token(client, session_factory)
        resp = client.put(f"{ADMIN}/{developer[0]['id']}/role", json={"role": "admin"}, headers=auth_headers(token))
        assert resp.status_code == 200
        assert resp.json()["role"] == "admin"

    def test_unknown_role_rejected(self, client, session_factory, developer):
        token = admin_token(client, session_factory)
        resp = client.put(f"{ADMIN}/{developer[0]['id']}/role", json={"role": "owner"}, headers=auth_headers(token))
        assert resp.status_code == 400

    def test_cannot_demote_self(self, client, session_factory):
        token = admin_token(client, session_factory)
        me = client.get(f"{API}/dashboard/user/me", headers=auth_headers(token)).json()
        resp = client.put(f"{ADMIN}/{me['id']}/role", json={"role": "developer"}, headers=auth_headers(token))
        assert resp.status_code == 400

    def test_delete_revokes_sessions_and_reserves_email(self, client, session_factory, developer):
        user, dev_token = developer
        token = admin_token(client, session_factory)

        assert client.delete(f"{ADMIN}/{user['id']}", headers=auth_headers(token)).status_code == 200

        assert client.get(f"{API}/dashboard/user/me", headers=auth_headers(dev_token)).status_code == 401
        resp = client.post(f"{API}/auth/login", json={"email": "dev@example.com", "password": "secret123"})
        assert resp.status_code == 401
        resp = client.post(
            f"{API}/auth/register",
            json={"email": "dev@example.com", "password": "secret123", "name": "Again"},
        )
        assert resp.status_code == 409
        assert {u["email"] for u in client.get(ADMIN, headers=auth_headers(token)).json()} == {"root@example.com"}

    def test_cannot_delete_self(self, client, session_factory):
        token = admin_token(client, session_factory)
        me = client.get(f"{API}/dashboard/user/me", headers=auth_headers(token)).json()
        assert client.delete(f"{ADMIN}/{me['id']}", headers=auth_headers(token)).status_code == 400


class TestHealth:
    def test_health(self, client):
        resp = client.get(f"{API}/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
