"""Tests for project CRUD, API keys, membership and access control."""
import uuid

from app.auth.access import AccessControl, AccessLevel
from app.auth.principal import ProjectPrincipal, UserPrincipal
from conftest import API, auth_headers, create_project, login, make_admin, register, sdk_headers

PROJECTS = f"{API}/dashboard/projects"


class TestProjectCrud:
    def test_create_returns_key(self, client, developer):
        user, token = developer
        resp = client.post(PROJECTS, json={"name": "Space Game"}, headers=auth_headers(token))
        assert resp.status_code == 201
        body = resp.json()
        assert body["name"] == "Space Game"
        assert body["owner_id"] == user["id"]
        assert body["api_key"].startswith("kog_")

    def test_empty_name_rejected(self, client, developer):
        _, token = developer
        resp = client.post(PROJECTS, json={"name": ""}, headers=auth_headers(token))
        assert resp.status_code == 400

    def test_list_includes_owned_projects(self, client, developer):
        _, token = developer
        first = create_project(client, token, "One")
        second = create_project(client, token, "Two")
        resp = client.get(PROJECTS, headers=auth_headers(token))
        assert resp.status_code == 200
        assert [p["id"] for p in resp.json()] == [first["id"], second["id"]]

    def test_update_and_delete(self, client, developer, project):
        _, token = developer
        url = f"{PROJECTS}/{project['id']}"

        resp = client.put(url, json={"name": "Renamed"}, headers=auth_headers(token))
        assert resp.status_code == 200
        assert resp.json()["name"] == "Renamed"

        assert client.delete(url, headers=auth_headers(token)).status_code == 200
        assert client.get(url, headers=auth_headers(token)).status_code == 404
        assert client.get(PROJECTS, headers=auth_headers(token)).json() == []

    def test_deleted_project_key_stops_working(self, client, developer, project):
        _, token = developer
        client.delete(f"{PROJECTS}/{project['id']}", headers=auth_headers(token))
        resp = client.post(
            f"{API}/sdk/event",
            json={
                "device_id": "d1", "platform": "iOS", "os_version": "17", "app_version": "1.0",
                "event_type": "custom", "event_name": "x",
            },
            headers=sdk_headers(project["api_key"]),
        )
        assert resp.status_code == 401

    def test_unknown_project_not_found(self, client, developer):
        _, token = developer
        resp = client.get(f"{PROJECTS}/{uuid.uuid4()}", headers=auth_headers(token))
        assert resp.status_code == 404

    def test_malformed_project_id_bad_request(self, client, developer):
        _, token = developer
        assert client.get(f"{PROJECTS}/not-a-uuid", headers=auth_headers(token)).status_code == 400


class TestApiKey:
    def test_get_api_key(self, client, developer, project):
        _, token = developer
        resp = client.get(f"{PROJECTS}/{project['id']}/api-key", headers=auth_headers(token))
        assert resp.status_code == 200
        assert resp.json()["api_key"] == project["api_key"]

    def test_regenerate_invalidates_old_key(self, client, developer, project):
        _, token = developer
        resp = client.post(f"{PROJECTS}/{project['id']}/api-key/regenerate", headers=auth_headers(token))
        assert resp.status_code == 200
        new_key = resp.json()["api_key"]
        assert new_key != project["api_key"]
        assert new_key.startswith("kog_")

        event = {
            "device_id": "d1", "platform": "iOS", "os_version": "17", "app_version": "1.0",
            "event_type": "custom", "event_name": "level_up",
        }
        old = client.post(f"{API}/sdk/event", json=event, headers=sdk_headers(project["api_key"]))
        assert old.status_code == 401
        new = client.post(f"{API}/sdk/event", json=event, headers=sdk_headers(new_key))
        assert new.status_code == 201


class TestAccessControl:
    def test_other_developer_forbidden_until_member(self, client, developer, project):
        register(client, "other@example.com")
        other_token = login(client, "other@example.com")
        owner_token = developer[1]
        url = f"{PROJECTS}/{project['id']}"

        assert client.get(url, headers=auth_headers(other_token)).status_code == 403
        assert client.get(PROJECTS, headers=auth_headers(other_token)).json() == []

        resp = client.post(
            f"{url}/users",
            json={"email": "other@example.com"},
            headers=auth_headers(owner_token),
        )
        assert resp.status_code == 201
        assert resp.json()["role"] == "contributor"

        assert client.get(url, headers=auth_headers(other_token)).status_code == 200
        listed = client.get(PROJECTS, headers=auth_headers(other_token)).json()
        assert [p["id"] for p in listed] == [project["id"]]

    def test_contributor_cannot_manage(self, client, developer, project):
        other = register(client, "other@example.com")
        other_token = login(client, "other@example.com")
        url = f"{PROJECTS}/{project['id']}"
        client.post(f"{url}/users", json={"user_id": other["id"]}, headers=auth_headers(developer[1]))

        assert client.put(url, json={"name": "Nope"}, headers=auth_headers(other_token)).status_code == 403
        assert client.post(f"{url}/api-key/regenerate", headers=auth_headers(other_token)).status_code == 403
        assert client.delete(url, headers=auth_headers(other_token)).status_code == 403

    def test_project_admin_can_manage_but_not_delete(self, client, developer, project):
        other = register(client, "other@example.com")
        other_token = login(client, "other@example.com")
        url = f"{PROJECTS}/{project['id']}"
        client.post(
            f"{url}/users",
            json={"user_id": other["id"], "role": "admin"},
            headers=auth_headers(developer[1]),
        )

        assert client.put(url, json={"name": "Managed"}, headers=auth_headers(other_token)).status_code == 200
        assert client.delete(url, headers=auth_headers(other_token)).status_code == 403

    def test_global_admin_sees_everything(self, client, session_factory, developer, project):
        register(client, "root@example.com")
        make_admin(session_factory, "root@example.com")
        admin_token = login(client, "root@example.com")

        assert client.get(f"{PROJECTS}/{project['id']}", headers=auth_headers(admin_token)).status_code == 200
        listed = client.get(PROJECTS, headers=auth_headers(admin_token)).json()
        assert [p["id"] for p in listed] == [project["id"]]

    def test_unknown_project_is_404_not_403(self, client, developer):
        register(client, "other@example.com")
        other_token = login(client, "other@example.com")
        resp = client.get(f"{PROJECTS}/{uuid.uuid4()}", headers=auth_headers(other_token))
        assert resp.status_code == 404

    def test_authorize_decisions(self, client, session_factory, developer, project):
        owner_id = uuid.UUID(developer[0]["id"])
        project_id = uuid.UUID(project["id"])
        with session_factory() as db:
            access = AccessControl(db)
            owner = UserPrincipal(user_id=owner_id, role="developer", email="dev@example.com")
            stranger = UserPrincipal(user_id=uuid.uuid4(), role="developer", email="x@example.com")

            assert access.authorize(owner, project_id, AccessLevel.OWN).allowed
            assert not access.authorize(stranger, project_id).allowed
            assert access.authorize(ProjectPrincipal(project_id=project_id), project_id).allowed
            assert not access.authorize(ProjectPrincipal(project_id=uuid.uuid4()), project_id).allowed

            denied = access.authorize(owner, uuid.uuid4())
            assert not denied.allowed
            assert denied.reason == "Project not found"


class TestMembers:
    def test_member_lifecycle(self, client, developer, project):
        other = register(client, "other@example.com", name="Other")
        token = developer[1]
        url = f"{PROJECTS}/{project['id']}/users"

        resp = client.post(url, json={"user_id": other["id"]}, headers=auth_headers(token))
        assert resp.status_code == 201

        members = client.get(url, headers=auth_headers(token)).json()
        assert len(members) == 1
        assert members[0]["email"] == "other@example.com"
        assert members[0]["name"] == "Other"

        resp = client.put(f"{url}/{other['id']}", json={"role": "admin"}, headers=auth_headers(token))
        assert resp.status_code == 200
        assert resp.json()["role"] == "admin"

        assert client.delete(f"{url}/{other['id']}", headers=auth_headers(token)).status_code == 200
        assert client.get(url, headers=auth_headers(token)).json() == []

    def test_duplicate_member_conflicts(self, client, developer, project):
        other = register(client, "other@example.com")
        url = f"{PROJECTS}/{project['id']}/users"
        client.post(url, json={"user_id": other["id"]}, headers=auth_headers(developer[1]))
        resp = client.post(url, json={"user_id": other["id"]}, headers=auth_headers(developer[1]))
        assert resp.status_code == 409

    def test_owner_cannot_be_added(self, client, developer, project):
        url = f"{PROJECTS}/{project['id']}/users"
        resp = client.post(url, json={"user_id": developer[0]["id"]}, headers=auth_headers(developer[1]))
        assert resp.status_code == 400

    def test_unknown_user_not_found(self, client, developer, project):
        url = f"{PROJECTS}/{project['id']}/users"
        resp = client.post(url, json={"email": "ghost@example.com"}, headers=auth_headers(developer[1]))
        assert resp.status_code == 404

    def test_identifier_required(self, client, developer, project):
        url = f"{PROJECTS}/{project['id']}/users"
        resp = client.post(url, json={"role": "admin"}, headers=auth_headers(developer[1]))
        assert resp.status_code == 400

    def test_removing_non_member_not_found(self, client, developer, project):
        url = f"{PROJECTS}/{project['id']}/users/{uuid.uuid4()}"
        assert client.delete(url, headers=auth_headers(developer[1])).status_code == 404
