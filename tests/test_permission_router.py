"""
Test suite for the permission endpoints under /api/v1/rbac/permissions.
"""
import uuid

from fastapi import status

RBAC = "/api/v1/rbac"

PERMISSIONS = f"{RBAC}/permissions"

SEEDED_PERMISSIONS = 16


class TestPermissionEndpoints:

    def test_create_and_get(self, client, admin_token):
        response = client.post(
            PERMISSIONS,
            json={
                "name": "Mark attendance",
                "slug": "attendance.mark",
                "resource": "attendance",
                "action": "mark",
                "is_active": True,
            },
            headers={"Authorization": admin_token},
        )
        assert response.status_code == status.HTTP_201_CREATED
        permission_id = response.json()["data"]["id"]

        response = client.get(f"{PERMISSIONS}/{permission_id}", headers={"Authorization": admin_token})
        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["resource"] == "attendance"
        assert data["action"] == "mark"
        assert data["is_active"] is True

    def test_missing_resource_is_422(self, client, admin_token):
        response = client.post(
            PERMISSIONS,
            json={"name": "Broken", "slug": "broken", "action": "view"},
            headers={"Authorization": admin_token},
        )
        assert response.status_code == 422

    def test_duplicate_slug_is_409(self, client, admin_token):
        response = client.post(
            PERMISSIONS,
            json={"name": "Roles again", "slug": "roles.view", "resource": "roles", "action": "view"},
            headers={"Authorization": admin_token},
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_list_contains_seeded_permissions(self, client, admin_token):
        response = client.get(PERMISSIONS, params={"limit": 100}, headers={"Authorization": admin_token})
        data = response.json()["data"]
        assert data["meta"]["total_items"] == SEEDED_PERMISSIONS
        resources = [p["resource"] for p in data["items"]]
        assert resources == sorted(resources)

    def test_search_by_action(self, client, admin_token):
        response = client.get(PERMISSIONS, params={"search": "DELETE"}, headers={"Authorization": admin_token})
        items = response.json()["data"]["items"]
        assert len(items) == 4
        assert {p["action"] for p in items} == {"delete"}

    def test_by_resource(self, client, admin_token):
        response = client.get(f"{PERMISSIONS}/resource/users", headers={"Authorization": admin_token})
        assert response.status_code == status.HTTP_200_OK
        actions = [p["action"] for p in response.json()["data"]]
        assert actions == ["create", "delete", "edit", "view"]

        response = client.get(f"{PERMISSIONS}/resource/unknown", headers={"Authorization": admin_token})
        assert response.json()["data"] == []

    def test_update_and_delete(self, client, admin_token):
        response = client.get(f"{PERMISSIONS}/resource/menus", headers={"Authorization": admin_token})
        permission_id = response.json()["data"][0]["id"]

        response = client.put(
            f"{PERMISSIONS}/{permission_id}",
            json={"description": "Create menus"},
            headers={"Authorization": admin_token},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["description"] == "Create menus"

        response = client.delete(f"{PERMISSIONS}/{permission_id}", headers={"Authorization": admin_token})
        assert response.status_code == status.HTTP_200_OK

        response = client.get(f"{PERMISSIONS}/{permission_id}", headers={"Authorization": admin_token})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_unknown_is_404(self, client, admin_token):
        response = client.put(
            f"{PERMISSIONS}/{uuid.uuid4()}",
            json={"name": "Ghost"},
            headers={"Authorization": admin_token},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_plain_user_forbidden(self, client, admin_user_id, user_token):
        response = client.get(PERMISSIONS, headers={"Authorization": user_token})
        assert response.status_code == status.HTTP_403_FORBIDDEN
