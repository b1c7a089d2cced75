"""
Authorization engine for the school RBAC core.

Validates input, orchestrates the CRUD layer inside a single transaction per
mutation, answers the ``user has permission`` / ``user has role`` predicates
and maps ORM rows to response DTOs.
"""
import math
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError, RBACError, StorageError, ValidationError
from app.core.logging_config import get_logger
from app.crud.iam import (
    menu_crud,
    permission_crud,
    role_crud,
    role_menu_crud,
    role_permission_crud,
    user_role_crud,
)
from app.database.session import transaction
from app.models.iam import Menu, Permission, Role, RoleMenu, UserRole
from app.schemas.iam import (
    CreatedResponse,
    MenuCreate,
    MenuGrant,
    MenuGrantUpdate,
    MenuResponse,
    MenuUpdate,
    PageResponse,
    PermissionCreate,
    PermissionResponse,
    PermissionUpdate,
    RBACMetadata,
    RoleCreate,
    RoleMenuResponse,
    RoleResponse,
    RoleUpdate,
    UserRoleResponse,
)

logger = get_logger(__name__)

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100


def normalize_paging(page: int, limit: int) -> Tuple[int, int]:
    """Clamp page to >= 1 and fall back to the default limit outside 1..100"""
    if page < 1:
        page = 1
    if limit < 1 or limit > MAX_PAGE_LIMIT:
        limit = DEFAULT_PAGE_LIMIT
    return page, limit


def build_meta(page: int, limit: int, total: int) -> RBACMetadata:
    return RBACMetadata(
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0,
        total_items=total,
    )


def role_to_response(role: Role) -> RoleResponse:
    return RoleResponse.model_validate(role)


def permission_to_response(permission: Permission) -> PermissionResponse:
    return PermissionResponse.model_validate(permission)


def menu_to_response(menu: Menu, children: Sequence[Menu] = ()) -> MenuResponse:
    dto = MenuResponse.model_validate(menu)
    dto.children = [MenuResponse.model_validate(child) for child in children]
    return dto


def role_menu_to_response(grant: RoleMenu, menu: Menu, children: Sequence[Menu] = ()) -> RoleMenuResponse:
    return RoleMenuResponse(
        id=grant.id,
        role_id=grant.role_id,
        menu_id=grant.menu_id,
        can_view=grant.can_view,
        can_create=grant.can_create,
        can_edit=grant.can_edit,
        can_delete=grant.can_delete,
        menu=menu_to_response(menu, children),
        created_at=grant.created_at,
        updated_at=grant.updated_at,
    )


def user_role_to_response(assignment: UserRole, role: Optional[Role] = None) -> UserRoleResponse:
    return UserRoleResponse(
        id=assignment.id,
        user_id=assignment.user_id,
        role_id=assignment.role_id,
        assigned_at=assignment.assigned_at,
        assigned_by=assignment.assigned_by,
        role=role_to_response(role) if role is not None else None,
    )


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """
    Classify persistence failures: unique-key races become ConflictError,
    anything else from SQLAlchemy becomes StorageError. Domain errors pass.
    """
    try:
        yield
    except RBACError:
        raise
    except IntegrityError as e:
        logger.warning(f"Integrity violation during {operation}: {e.orig}")
        raise ConflictError(f"failed to {operation}: conflicting record") from e
    except SQLAlchemyError as e:
        # Driver text stays in the log, clients only see the operation
        logger.exception(f"Storage failure during {operation}")
        raise StorageError(f"failed to {operation}") from e


class RBACService:
    """Roles, permissions, menus and their assignments"""

    @contextmanager
    def _unit_of_work(self, db: Session, operation: str) -> Iterator[Session]:
        with storage_errors(operation):
            with transaction(db):
                yield db

    # ------------------------------------------------------------------
    # Slug validation
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_slug(crud, kind: str, db: Session, slug: str, exclude_id: Optional[UUID]) -> None:
        existing = crud.get_by_slug(db, slug=slug)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(f"{kind} slug already exists", details={"slug": slug})

    def validate_role_slug(self, db: Session, slug: str, exclude_id: Optional[UUID] = None) -> None:
        with storage_errors("validate role slug"):
            self._validate_slug(role_crud, "role", db, slug, exclude_id)

    def validate_permission_slug(self, db: Session, slug: str, exclude_id: Optional[UUID] = None) -> None:
        with storage_errors("validate permission slug"):
            self._validate_slug(permission_crud, "permission", db, slug, exclude_id)

    def validate_menu_slug(self, db: Session, slug: str, exclude_id: Optional[UUID] = None) -> None:
        with storage_errors("validate menu slug"):
            self._validate_slug(menu_crud, "menu", db, slug, exclude_id)

    # ------------------------------------------------------------------
    # Lookups that raise
    # ------------------------------------------------------------------

    @staticmethod
    def _require_role(db: Session, role_id: UUID) -> Role:
        role = role_crud.get(db, role_id)
        if role is None:
            raise NotFoundError("role not found", details={"role_id": str(role_id)})
        return role

    @staticmethod
    def _require_permission(db: Session, permission_id: UUID) -> Permission:
        permission = permission_crud.get(db, permission_id)
        if permission is None:
            raise NotFoundError("permission not found", details={"permission_id": str(permission_id)})
        return permission

    @staticmethod
    def _require_menu(db: Session, menu_id: UUID) -> Menu:
        menu = menu_crud.get(db, menu_id)
        if menu is None:
            raise NotFoundError("menu not found", details={"menu_id": str(menu_id)})
        return menu

    @staticmethod
    def _reject_parent_cycle(db: Session, menu_id: UUID, parent: Menu) -> None:
        """Walk up from the new parent; reaching the menu itself would close a loop"""
        seen = set()
        ancestor = parent
        while ancestor is not None and ancestor.parent_id is not None and ancestor.id not in seen:
            seen.add(ancestor.id)
            if ancestor.parent_id == menu_id:
                raise ValidationError(
                    "menu cannot be moved under its own descendant",
                    details={"menu_id": str(menu_id), "parent_id": str(parent.id)},
                )
            ancestor = menu_crud.get(db, ancestor.parent_id)

    @staticmethod
    def _reject_duplicates(kind: str, ids: Sequence[UUID]) -> None:
        duplicates = sorted({str(i) for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValidationError(f"duplicate {kind} ids in request", details={"duplicate_ids": duplicates})

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def create_role(self, db: Session, obj_in: RoleCreate, actor_id: Optional[UUID] = None) -> CreatedResponse:
        with self._unit_of_work(db, "create role"):
            self._validate_slug(role_crud, "role", db, obj_in.slug, None)
            data = obj_in.model_dump()
            data["is_active"] = obj_in.is_active is True
            role = role_crud.create(db, obj_in=data, actor_id=actor_id)
            role_id = role.id
        logger.info(f"Role created: id={role_id} slug={obj_in.slug} by={actor_id}")
        return CreatedResponse(id=role_id, message="Role created successfully")

    def update_role(self, db: Session, role_id: UUID, obj_in: RoleUpdate, actor_id: Optional[UUID] = None) -> RoleResponse:
        with self._unit_of_work(db, "update role"):
            role = self._require_role(db, role_id)
            data = {k: v for k, v in obj_in.model_dump(exclude_unset=True).items() if v is not None}
            if "slug" in data:
                self._validate_slug(role_crud, "role", db, data["slug"], role_id)
            role = role_crud.update(db, db_obj=role, obj_in=data, actor_id=actor_id)
        logger.info(f"Role updated: id={role_id} fields={sorted(data)} by={actor_id}")
        return role_to_response(role)

    def delete_role(self, db: Session, role_id: UUID, actor_id: Optional[UUID] = None) -> None:
        with self._unit_of_work(db, "delete role"):
            role = self._require_role(db, role_id)
            role_crud.soft_delete(db, db_obj=role, actor_id=actor_id)
        logger.info(f"Role deleted: id={role_id} by={actor_id}")

    def get_role(self, db: Session, role_id: UUID) -> RoleResponse:
        with storage_errors("get role"):
            return role_to_response(self._require_role(db, role_id))

    def list_roles(self, db: Session, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT, search: Optional[str] = None) -> PageResponse[RoleResponse]:
        page, limit = normalize_paging(page, limit)
        with storage_errors("list roles"):
            roles, total = role_crud.get_page(db, page=page, limit=limit, search=search)
        return PageResponse[RoleResponse](
            items=[role_to_response(r) for r in roles],
            meta=build_meta(page, limit, total),
        )

    def get_role_with_permissions(self, db: Session, role_id: UUID) -> RoleResponse:
        with storage_errors("get role permissions"):
            role = self._require_role(db, role_id)
            permissions = permission_crud.get_for_role(db, role_id=role_id)
        dto = role_to_response(role)
        dto.permissions = [permission_to_response(p) for p in permissions]
        return dto

    def get_role_with_menus(self, db: Session, role_id: UUID) -> RoleResponse:
        with storage_errors("get role menus"):
            role = self._require_role(db, role_id)
            rows = role_menu_crud.get_for_role(db, role_id=role_id)
        dto = role_to_response(role)
        dto.menus = [menu_to_response(menu) for _, menu in rows]
        return dto

    def get_role_menu_grants(self, db: Session, role_id: UUID) -> List[RoleMenuResponse]:
        """Menus of a role together with the per-action flags of each grant"""
        with storage_errors("get role menus"):
            self._require_role(db, role_id)
            rows = role_menu_crud.get_for_role(db, role_id=role_id)
        return [role_menu_to_response(grant, menu) for grant, menu in rows]

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    def create_permission(self, db: Session, obj_in: PermissionCreate, actor_id: Optional[UUID] = None) -> CreatedResponse:
        with self._unit_of_work(db, "create permission"):
            self._validate_slug(permission_crud, "permission", db, obj_in.slug, None)
            data = obj_in.model_dump()
            data["is_active"] = obj_in.is_active is True
            permission = permission_crud.create(db, obj_in=data, actor_id=actor_id)
            permission_id = permission.id
        logger.info(f"Permission created: id={permission_id} slug={obj_in.slug} by={actor_id}")
        return CreatedResponse(id=permission_id, message="Permission created successfully")

    def update_permission(self, db: Session, permission_id: UUID, obj_in: PermissionUpdate, actor_id: Optional[UUID] = None) -> PermissionResponse:
        with self._unit_of_work(db, "update permission"):
            permission = self._require_permission(db, permission_id)
            data = {k: v for k, v in obj_in.model_dump(exclude_unset=True).items() if v is not None}
            if "slug" in data:
                self._validate_slug(permission_crud, "permission", db, data["slug"], permission_id)
            permission = permission_crud.update(db, db_obj=permission, obj_in=data, actor_id=actor_id)
        logger.info(f"Permission updated: id={permission_id} fields={sorted(data)} by={actor_id}")
        return permission_to_response(permission)

    def delete_permission(self, db: Session, permission_id: UUID, actor_id: Optional[UUID] = None) -> None:
        with self._unit_of_work(db, "delete permission"):
            permission = self._require_permission(db, permission_id)
            permission_crud.soft_delete(db, db_obj=permission, actor_id=actor_id)
        logger.info(f"Permission deleted: id={permission_id} by={actor_id}")

    def get_permission(self, db: Session, permission_id: UUID) -> PermissionResponse:
        with storage_errors("get permission"):
            return permission_to_response(self._require_permission(db, permission_id))

    def list_permissions(self, db: Session, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT, search: Optional[str] = None) -> PageResponse[PermissionResponse]:
        page, limit = normalize_paging(page, limit)
        with storage_errors("list permissions"):
            permissions, total = permission_crud.get_page(db, page=page, limit=limit, search=search)
        return PageResponse[PermissionResponse](
            items=[permission_to_response(p) for p in permissions],
            meta=build_meta(page, limit, total),
        )

    def get_permissions_by_resource(self, db: Session, resource: str) -> List[PermissionResponse]:
        with storage_errors("get permissions by resource"):
            permissions = permission_crud.get_by_resource(db, resource=resource)
        return [permission_to_response(p) for p in permissions]

    # ------------------------------------------------------------------
    # Menus
    # ------------------------------------------------------------------

    def create_menu(self, db: Session, obj_in: MenuCreate, actor_id: Optional[UUID] = None) -> CreatedResponse:
        with self._unit_of_work(db, "create menu"):
            self._validate_slug(menu_crud, "menu", db, obj_in.slug, None)
            if obj_in.parent_id is not None and menu_crud.get(db, obj_in.parent_id) is None:
                raise NotFoundError("parent menu not found", details={"parent_id": str(obj_in.parent_id)})
            data = obj_in.model_dump()
            data["is_active"] = obj_in.is_active is True
            data["sort_order"] = obj_in.sort_order or 0
            menu = menu_crud.create(db, obj_in=data, actor_id=actor_id)
            menu_id = menu.id
        logger.info(f"Menu created: id={menu_id} slug={obj_in.slug} by={actor_id}")
        return CreatedResponse(id=menu_id, message="Menu created successfully")

    def update_menu(self, db: Session, menu_id: UUID, obj_in: MenuUpdate, actor_id: Optional[UUID] = None) -> MenuResponse:
        with self._unit_of_work(db, "update menu"):
            menu = self._require_menu(db, menu_id)
            # parent_id: explicit null detaches the menu, every other None is ignored
            data = {
                k: v for k, v in obj_in.model_dump(exclude_unset=True).items()
                if v is not None or k == "parent_id"
            }
            if "slug" in data:
                self._validate_slug(menu_crud, "menu", db, data["slug"], menu_id)
            parent_id = data.get("parent_id")
            if parent_id is not None:
                if parent_id == menu_id:
                    raise ValidationError("menu cannot be parent of itself", details={"menu_id": str(menu_id)})
                parent = menu_crud.get(db, parent_id)
                if parent is None:
                    raise NotFoundError("parent menu not found", details={"parent_id": str(parent_id)})
                self._reject_parent_cycle(db, menu_id, parent)
            menu = menu_crud.update(db, db_obj=menu, obj_in=data, actor_id=actor_id)
        logger.info(f"Menu updated: id={menu_id} fields={sorted(data)} by={actor_id}")
        return menu_to_response(menu)

    def delete_menu(self, db: Session, menu_id: UUID, actor_id: Optional[UUID] = None) -> None:
        with self._unit_of_work(db, "delete menu"):
            menu = self._require_menu(db, menu_id)
            menu_crud.soft_delete(db, db_obj=menu, actor_id=actor_id)
        logger.info(f"Menu deleted: id={menu_id} by={actor_id}")

    def get_menu(self, db: Session, menu_id: UUID) -> MenuResponse:
        with storage_errors("get menu"):
            return menu_to_response(self._require_menu(db, menu_id))

    def list_menus(self, db: Session, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT, search: Optional[str] = None) -> PageResponse[MenuResponse]:
        page, limit = normalize_paging(page, limit)
        with storage_errors("list menus"):
            menus, total = menu_crud.get_page(db, page=page, limit=limit, search=search)
        return PageResponse[MenuResponse](
            items=[menu_to_response(m) for m in menus],
            meta=build_meta(page, limit, total),
        )

    # ------------------------------------------------------------------
    # Role <-> permission
    # ------------------------------------------------------------------

    def assign_permissions_to_role(self, db: Session, role_id: UUID, permission_ids: Sequence[UUID], actor_id: Optional[UUID] = None) -> int:
        """Replace the role's permission set; an empty list clears it"""
        ids = list(permission_ids)
        self._reject_duplicates("permission", ids)
        with self._unit_of_work(db, "assign permissions to role"):
            self._require_role(db, role_id)
            found = {p.id for p in permission_crud.get_multi_by_ids(db, ids=ids)}
            missing = [str(pid) for pid in ids if pid not in found]
            if missing:
                raise ValidationError("some permissions not found", details={"missing_ids": missing})
            assigned = role_permission_crud.replace_for_role(db, role_id=role_id, permission_ids=ids, actor_id=actor_id)
        logger.info(f"Permissions assigned: role={role_id} count={assigned} by={actor_id}")
        return assigned

    def remove_permissions_from_role(self, db: Session, role_id: UUID, permission_ids: Sequence[UUID]) -> int:
        with self._unit_of_work(db, "remove permissions from role"):
            self._require_role(db, role_id)
            removed = role_permission_crud.remove_for_role(db, role_id=role_id, permission_ids=list(dict.fromkeys(permission_ids)))
        logger.info(f"Permissions removed: role={role_id} count={removed}")
        return removed

    # ------------------------------------------------------------------
    # Role <-> menu
    # ------------------------------------------------------------------

    def assign_menus_to_role(self, db: Session, role_id: UUID, menu_permissions: Sequence[MenuGrant], actor_id: Optional[UUID] = None) -> int:
        """Replace the role's menu grants; validation finishes before any delete"""
        menu_ids = [grant.menu_id for grant in menu_permissions]
        self._reject_duplicates("menu", menu_ids)
        with self._unit_of_work(db, "assign menus to role"):
            self._require_role(db, role_id)
            found = {m.id for m in menu_crud.get_multi_by_ids(db, ids=menu_ids)}
            missing = [str(mid) for mid in menu_ids if mid not in found]
            if missing:
                raise ValidationError("some menus not found", details={"missing_ids": missing})
            assigned = role_menu_crud.replace_for_role(db, role_id=role_id, grants=menu_permissions, actor_id=actor_id)
        logger.info(f"Menus assigned: role={role_id} count={assigned} by={actor_id}")
        return assigned

    def update_menu_grant(self, db: Session, role_id: UUID, menu_id: UUID, flags: MenuGrantUpdate, actor_id: Optional[UUID] = None) -> RoleMenuResponse:
        with self._unit_of_work(db, "update menu grant"):
            self._require_role(db, role_id)
            menu = self._require_menu(db, menu_id)
            grant = role_menu_crud.get(db, role_id=role_id, menu_id=menu_id)
            if grant is None:
                raise NotFoundError("menu is not assigned to role", details={"role_id": str(role_id), "menu_id": str(menu_id)})
            grant = role_menu_crud.update_flags(db, db_obj=grant, flags=flags, actor_id=actor_id)
        logger.info(f"Menu grant updated: role={role_id} menu={menu_id} by={actor_id}")
        return role_menu_to_response(grant, menu)

    def remove_menus_from_role(self, db: Session, role_id: UUID, menu_ids: Sequence[UUID]) -> int:
        with self._unit_of_work(db, "remove menus from role"):
            self._require_role(db, role_id)
            removed = role_menu_crud.remove_for_role(db, role_id=role_id, menu_ids=list(dict.fromkeys(menu_ids)))
        logger.info(f"Menus removed: role={role_id} count={removed}")
        return removed

    # ------------------------------------------------------------------
    # User <-> role
    # ------------------------------------------------------------------

    def assign_roles_to_user(self, db: Session, user_id: UUID, role_ids: Sequence[UUID], actor_id: Optional[UUID] = None) -> int:
        """Replace the user's role set; every role must exist first"""
        ids = list(role_ids)
        self._reject_duplicates("role", ids)
        with self._unit_of_work(db, "assign roles to user"):
            for role_id in ids:
                if role_crud.get(db, role_id) is None:
                    raise NotFoundError(f"role with ID {role_id} not found", details={"role_id": str(role_id)})
            assigned = user_role_crud.replace_for_user(db, user_id=user_id, role_ids=ids, actor_id=actor_id)
        logger.info(f"Roles assigned: user={user_id} count={assigned} by={actor_id}")
        return assigned

    def remove_roles_from_user(self, db: Session, user_id: UUID, role_ids: Sequence[UUID]) -> int:
        with self._unit_of_work(db, "remove roles from user"):
            removed = user_role_crud.remove_for_user(db, user_id=user_id, role_ids=list(dict.fromkeys(role_ids)))
        logger.info(f"Roles removed: user={user_id} count={removed}")
        return removed

    def get_user_roles(self, db: Session, user_id: UUID) -> List[UserRoleResponse]:
        with storage_errors("get user roles"):
            rows = user_role_crud.get_for_user(db, user_id=user_id)
        return [user_role_to_response(assignment, role) for assignment, role in rows]

    def get_role_users(self, db: Session, role_id: UUID, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT) -> PageResponse[UserRoleResponse]:
        page, limit = normalize_paging(page, limit)
        with storage_errors("get role users"):
            self._require_role(db, role_id)
            assignments, total = user_role_crud.get_page_for_role(db, role_id=role_id, page=page, limit=limit)
        return PageResponse[UserRoleResponse](
            items=[user_role_to_response(a) for a in assignments],
            meta=build_meta(page, limit, total),
        )

    # ------------------------------------------------------------------
    # Authorization predicates
    # ------------------------------------------------------------------

    def check_user_permission(self, db: Session, user_id: UUID, resource: str, action: str) -> bool:
        with storage_errors("check user permission"):
            allowed = permission_crud.user_has_permission(db, user_id=user_id, resource=resource, action=action)
        if not allowed:
            logger.warning(f"Permission denied: user={user_id} resource={resource} action={action}")
        return allowed

    def check_user_role(self, db: Session, user_id: UUID, role_slug: str) -> bool:
        with storage_errors("check user role"):
            has_role = role_crud.user_has_role(db, user_id=user_id, role_slug=role_slug)
        if not has_role:
            logger.warning(f"Role check failed: user={user_id} role={role_slug}")
        return has_role

    def check_role_permission(self, db: Session, role_id: UUID, permission_slug: str) -> bool:
        with storage_errors("check role permission"):
            return permission_crud.role_has_permission(db, role_id=role_id, permission_slug=permission_slug)

    def get_user_permissions(self, db: Session, user_id: UUID) -> List[PermissionResponse]:
        with storage_errors("get user permissions"):
            permissions = permission_crud.get_for_user(db, user_id=user_id)
        return [permission_to_response(p) for p in permissions]


rbac_service = RBACService()
