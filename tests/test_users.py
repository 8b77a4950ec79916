"""
Tests for user management and role assignment.
"""
import pytest


class TestUserAccess:
    def test_requires_token(self, client):
        assert client.get("/users").status_code == 401

    def test_editor_is_forbidden(self, client, editor_headers):
        response = client.get("/users", headers=editor_headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Insufficient permissions"

    def test_role_check_is_case_insensitive(self, client, db, make_user, headers_for):
        from sqlalchemy import select

        from blog_api.models.role import Role

        # stored name differs only in case from the allow-list entry
        role = db.scalars(select(Role).where(Role.name == "manager")).one()
        role.name = "MANAGER"
        db.commit()

        boss = make_user("boss", ["manager"])
        response = client.get("/users", headers=headers_for(boss))
        assert response.status_code == 200


class TestUserCrud:
    def test_list_users_newest_first(self, client, manager_headers, editor):
        response = client.get("/users", headers=manager_headers)
        assert response.status_code == 200
        usernames = [u["username"] for u in response.json()]
        assert set(usernames) == {"manager", "editor"}
        assert usernames[0] == "editor"

    def test_create_user_with_roles(self, client, manager_headers):
        response = client.post(
            "/users",
            json={
                "username": "gina",
                "email": "gina@example.com",
                "password": "pw",
                "roles": ["Editor", "editor", "MANAGER"],
            },
            headers=manager_headers,
        )
        assert response.status_code == 201
        assert sorted(response.json()["roles"]) == ["editor", "manager"]

    def test_create_user_unknown_role(self, client, manager_headers):
        response = client.post(
            "/users",
            json={"username": "hank", "email": "hank@example.com", "password": "pw", "roles": ["admin"]},
            headers=manager_headers,
        )
        assert response.status_code == 404
        assert response.json()["details"] == {"roles": ["admin"]}

        listing = client.get("/users", headers=manager_headers).json()
        assert "hank" not in [u["username"] for u in listing]

    @pytest.mark.parametrize("field", ["username", "email"])
    def test_create_user_conflict(self, client, manager_headers, editor, field):
        payload = {"username": "ivy", "email": "ivy@example.com", "password": "pw"}
        payload[field] = "editor" if field == "username" else "editor@example.com"
        response = client.post("/users", json=payload, headers=manager_headers)
        assert response.status_code == 409

    def test_get_user_includes_post_count(self, client, manager_headers, editor, editor_headers):
        client.post(
            "/posts",
            json={"title": "Hello", "slug": "hello", "content": "Body"},
            headers=editor_headers,
        )
        response = client.get(f"/users/{editor.id}", headers=manager_headers)
        assert response.status_code == 200
        assert response.json()["post_count"] == 1
        assert response.json()["roles"] == ["editor"]

    def test_get_missing_user(self, client, manager_headers):
        assert client.get("/users/9999", headers=manager_headers).status_code == 404

    def test_invalid_id(self, client, manager_headers):
        assert client.get("/users/0", headers=manager_headers).status_code == 400
        assert client.get("/users/abc", headers=manager_headers).status_code == 400

    def test_update_user_fields_and_password(self, client, manager_headers, editor):
        response = client.put(
            f"/users/{editor.id}",
            json={"full_name": "Ed Itor", "password": "new-password"},
            headers=manager_headers,
        )
        assert response.status_code == 200
        assert response.json()["full_name"] == "Ed Itor"

        login = client.post("/auth/login", json={"identifier": "editor", "password": "new-password"})
        assert login.status_code == 200

    def test_update_user_conflict(self, client, manager_headers, editor):
        response = client.put(
            f"/users/{editor.id}", json={"email": "manager@example.com"}, headers=manager_headers
        )
        assert response.status_code == 409

    def test_update_user_replaces_roles(self, client, manager_headers, editor):
        response = client.put(
            f"/users/{editor.id}", json={"roles": ["manager"]}, headers=manager_headers
        )
        assert response.status_code == 200
        assert response.json()["roles"] == ["manager"]

    def test_update_user_unknown_role_changes_nothing(self, client, manager_headers, editor):
        response = client.put(
            f"/users/{editor.id}",
            json={"full_name": "Changed", "roles": ["manager", "ghost"]},
            headers=manager_headers,
        )
        assert response.status_code == 404

        user = client.get(f"/users/{editor.id}", headers=manager_headers).json()
        assert user["roles"] == ["editor"]
        assert user["full_name"] is None

    def test_update_user_empty_roles_clears_grants(self, client, manager_headers, editor):
        response = client.put(f"/users/{editor.id}", json={"roles": []}, headers=manager_headers)
        assert response.status_code == 200
        assert response.json()["roles"] == []

    def test_delete_user_is_soft(self, client, db, manager_headers, editor):
        from blog_api.models.user import User

        response = client.delete(f"/users/{editor.id}", headers=manager_headers)
        assert response.status_code == 204
        assert client.get(f"/users/{editor.id}", headers=manager_headers).status_code == 404

        db.expire_all()
        row = db.get(User, editor.id)
        assert row is not None
        assert row.deleted_at is not None


class TestRoleAssignment:
    def test_assign_role(self, client, manager_headers, editor):
        response = client.post(
            f"/users/{editor.id}/roles", json={"role": "manager"}, headers=manager_headers
        )
        assert response.status_code == 201
        assert sorted(response.json()["roles"]) == ["editor", "manager"]

    def test_assign_same_role_twice_case_insensitive(self, client, manager_headers, editor):
        first = client.post(f"/users/{editor.id}/roles", json={"role": "manager"}, headers=manager_headers)
        second = client.post(f"/users/{editor.id}/roles", json={"role": "MaNaGeR"}, headers=manager_headers)
        assert first.status_code == 201
        assert second.status_code == 409

    def test_assign_unknown_role(self, client, manager_headers, editor):
        response = client.post(
            f"/users/{editor.id}/roles", json={"role": "admin"}, headers=manager_headers
        )
        assert response.status_code == 404

    def test_assign_role_missing_user(self, client, manager_headers):
        response = client.post("/users/9999/roles", json={"role": "editor"}, headers=manager_headers)
        assert response.status_code == 404

    def test_remove_role(self, client, manager_headers, editor):
        response = client.delete(f"/users/{editor.id}/roles/EDITOR", headers=manager_headers)
        assert response.status_code == 200
        assert response.json()["roles"] == []

    def test_remove_unassigned_role(self, client, manager_headers, editor):
        response = client.delete(f"/users/{editor.id}/roles/manager", headers=manager_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "User does not have this role"
