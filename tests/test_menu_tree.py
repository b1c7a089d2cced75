"""
Tests for menu tree resolution and per-user menu grants.
"""
import uuid

import pytest

from app.schemas.iam import MenuGrant, MenuUpdate, RoleUpdate
from app.services.menu_tree_service import menu_tree_service
from app.services.rbac_service import rbac_service


class TestMenuTree:

    def test_roots_ordered_with_one_level_of_children(self, test_db, make_menu):
        reports = make_menu("reports", name="Reports", sort_order=2)
        academics = make_menu("academics", name="Academics", sort_order=1)
        admissions = make_menu("admissions", name="Admissions", sort_order=1)
        classes = make_menu("classes", name="Classes", parent_id=academics, sort_order=5)
        exams = make_menu("exams", name="Exams", parent_id=academics, sort_order=0)
        make_menu("timetable", name="Timetable", parent_id=classes)

        tree = menu_tree_service.get_menu_tree(test_db)

        assert [m.id for m in tree] == [academics, admissions, reports]
        assert [c.id for c in tree[0].children] == [exams, classes]
        # Grandchildren are not expanded
        assert all(c.children == [] for c in tree[0].children)
        assert tree[1].children == []

    def test_inactive_and_deleted_menus_are_hidden(self, test_db, make_menu):
        academics = make_menu("academics")
        make_menu("classes", parent_id=academics)
        hidden_child = make_menu("archive", parent_id=academics, is_active=False)
        deleted_root = make_menu("legacy")
        make_menu("draft", is_active=False)
        rbac_service.delete_menu(test_db, deleted_root)

        tree = menu_tree_service.get_menu_tree(test_db)
        assert [m.slug for m in tree] == ["academics"]
        assert hidden_child not in [c.id for c in tree[0].children]
        assert [c.slug for c in tree[0].children] == ["classes"]

    def test_switching_off_a_menu_removes_it(self, test_db, make_menu):
        home = make_menu("home")
        rbac_service.update_menu(test_db, home, MenuUpdate(is_active=False))
        assert menu_tree_service.get_menu_tree(test_db) == []


class TestUserMenus:

    @pytest.fixture
    def two_roles(self, test_db, make_role, make_menu):
        user_id = uuid.uuid4()
        teacher = make_role("teacher")
        coach = make_role("coach")
        home = make_menu("home", sort_order=0)
        sports = make_menu("sports", sort_order=1)
        rbac_service.assign_menus_to_role(
            test_db, teacher, [MenuGrant(menu_id=home, can_view=True, can_edit=True)]
        )
        rbac_service.assign_menus_to_role(
            test_db, coach,
            [
                MenuGrant(menu_id=home, can_view=False, can_delete=True),
                MenuGrant(menu_id=sports, can_view=True),
            ],
        )
        rbac_service.assign_roles_to_user(test_db, user_id, [teacher, coach])
        return user_id, teacher, coach, home, sports

    def test_raw_rows_repeat_menus(self, test_db, two_roles):
        user_id, _, _, home, sports = two_roles
        rows = menu_tree_service.get_user_menus(test_db, user_id)

        assert len(rows) == 3
        assert [r.menu_id for r in rows].count(home) == 2
        assert [r.menu_id for r in rows][-1] == sports

    def test_merged_rows_or_the_flags(self, test_db, two_roles):
        user_id, _, _, home, sports = two_roles
        merged = menu_tree_service.get_user_menus(test_db, user_id, merge=True)

        assert [m.menu_id for m in merged] == [home, sports]
        assert (merged[0].can_view, merged[0].can_create, merged[0].can_edit, merged[0].can_delete) == (
            True, False, True, True
        )

    def test_inactive_role_grants_nothing(self, test_db, two_roles):
        user_id, teacher, coach, _, _ = two_roles
        rbac_service.update_role(test_db, teacher, RoleUpdate(is_active=False))
        rbac_service.delete_role(test_db, coach)
        assert menu_tree_service.get_user_menus(test_db, user_id) == []

    def test_accessible_menus_need_can_view(self, test_db, two_roles):
        user_id, teacher, coach, home, sports = two_roles

        rows = menu_tree_service.get_user_accessible_menus(test_db, user_id)
        assert [(r.role_id, r.menu_id) for r in rows] == [(teacher, home), (coach, sports)]
        # The other flags of a viewable grant survive the filter
        assert (rows[0].can_view, rows[0].can_edit, rows[0].can_delete) == (True, True, False)
        assert rows[0].menu.slug == "home"

        # Coach alone only views sports
        rbac_service.assign_roles_to_user(test_db, user_id, [coach])
        rows = menu_tree_service.get_user_accessible_menus(test_db, user_id)
        assert [r.menu_id for r in rows] == [sports]

    def test_accessible_menus_merged_per_menu(self, test_db, two_roles, make_role):
        user_id, teacher, coach, home, sports = two_roles
        clerk = make_role("clerk")
        rbac_service.assign_menus_to_role(
            test_db, clerk, [MenuGrant(menu_id=home, can_view=True, can_create=True)]
        )
        rbac_service.assign_roles_to_user(test_db, user_id, [teacher, coach, clerk])

        rows = menu_tree_service.get_user_accessible_menus(test_db, user_id)
        assert [r.menu_id for r in rows] == [home, home, sports]

        merged = menu_tree_service.get_user_accessible_menus(test_db, user_id, merge=True)
        assert [m.menu_id for m in merged] == [home, sports]
        # Coach's non-viewable grant on home does not contribute can_delete
        assert (merged[0].can_view, merged[0].can_create, merged[0].can_edit, merged[0].can_delete) == (
            True, True, True, False
        )

    def test_accessible_menus_carry_children(self, test_db, make_role, make_menu):
        user_id = uuid.uuid4()
        role_id = make_role("teacher")
        academics = make_menu("academics")
        classes = make_menu("classes", parent_id=academics)
        make_menu("archive", parent_id=academics, is_active=False)
        rbac_service.assign_menus_to_role(test_db, role_id, [MenuGrant(menu_id=academics, can_view=True)])
        rbac_service.assign_roles_to_user(test_db, user_id, [role_id])

        rows = menu_tree_service.get_user_accessible_menus(test_db, user_id)
        assert len(rows) == 1
        assert [c.id for c in rows[0].menu.children] == [classes]

        merged = menu_tree_service.get_user_accessible_menus(test_db, user_id, merge=True)
        assert [c.id for c in merged[0].menu.children] == [classes]

    def test_user_without_roles(self, test_db):
        user_id = uuid.uuid4()
        assert menu_tree_service.get_user_menus(test_db, user_id) == []
        assert menu_tree_service.get_user_menus(test_db, user_id, merge=True) == []
        assert menu_tree_service.get_user_accessible_menus(test_db, user_id) == []
