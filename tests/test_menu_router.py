"""
Test suite for the menu endpoints under /api/v1/rbac/menus.
"""
import uuid

from fastapi import status

RBAC = "/api/v1/rbac"

MENUS = f"{RBAC}/menus"


def create_menu(client, token, slug, **extra):
    payload = {"name": slug.title(), "slug": slug, "url": f"/{slug}", "is_active": True, **extra}
    response = client.post(MENUS, json=payload, headers={"Authorization": token})
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["data"]["id"]


class TestMenuEndpoints:

    def test_create_with_unknown_parent_is_404(self, client, admin_token):
        response = client.post(
            MENUS,
            json={"name": "Orphan", "slug": "orphan", "parent_id": str(uuid.uuid4())},
            headers={"Authorization": admin_token},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"]["message"] == "parent menu not found"

    def test_tree(self, client, admin_token):
        academics = create_menu(client, admin_token, "academics", sort_order=1)
        dashboard = create_menu(client, admin_token, "dashboard", sort_order=0)
        classes = create_menu(client, admin_token, "classes", parent_id=academics)

        response = client.get(f"{MENUS}/tree", headers={"Authorization": admin_token})
        assert response.status_code == status.HTTP_200_OK
        tree = response.json()["data"]
        assert [m["id"] for m in tree] == [dashboard, academics]
        assert [c["id"] for c in tree[1]["children"]] == [classes]

    def test_self_parent_is_400(self, client, admin_token):
        menu_id = create_menu(client, admin_token, "home")
        response = client.put(
            f"{MENUS}/{menu_id}",
            json={"parent_id": menu_id},
            headers={"Authorization": admin_token},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["error_code"] == "VALIDATION_FAILED"

    def test_parent_loop_is_400_and_tree_intact(self, client, admin_token):
        academics = create_menu(client, admin_token, "academics")
        classes = create_menu(client, admin_token, "classes", parent_id=academics)

        response = client.put(
            f"{MENUS}/{academics}",
            json={"parent_id": classes},
            headers={"Authorization": admin_token},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["error_code"] == "VALIDATION_FAILED"

        tree = client.get(f"{MENUS}/tree", headers={"Authorization": admin_token}).json()["data"]
        assert [m["id"] for m in tree] == [academics]
        assert [c["id"] for c in tree[0]["children"]] == [classes]

    def test_null_parent_moves_to_root(self, client, admin_token):
        parent = create_menu(client, admin_token, "academics")
        child = create_menu(client, admin_token, "classes", parent_id=parent)

        response = client.put(f"{MENUS}/{child}", json={"parent_id": None}, headers={"Authorization": admin_token})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["parent_id"] is None

    def test_list_get_delete(self, client, admin_token):
        menu_id = create_menu(client, admin_token, "library")

        response = client.get(MENUS, params={"search": "/LIB"}, headers={"Authorization": admin_token})
        assert [m["id"] for m in response.json()["data"]["items"]] == [menu_id]

        response = client.get(f"{MENUS}/{menu_id}", headers={"Authorization": admin_token})
        assert response.json()["data"]["url"] == "/library"

        client.delete(f"{MENUS}/{menu_id}", headers={"Authorization": admin_token})
        response = client.get(f"{MENUS}/{menu_id}", headers={"Authorization": admin_token})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_slug_reusable_after_delete(self, client, admin_token):
        menu_id = create_menu(client, admin_token, "library")
        client.delete(f"{MENUS}/{menu_id}", headers={"Authorization": admin_token})
        assert create_menu(client, admin_token, "library") != menu_id
