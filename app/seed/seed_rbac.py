import logging
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.config import settings
from app.crud.base import utcnow
from app.models.iam import Permission, Role, RolePermission, UserRole

logger = logging.getLogger(__name__)

PERMISSION_MATRIX = {
    "roles": ["view", "create", "edit", "delete"],
    "permissions": ["view", "create", "edit", "delete"],
    "menus": ["view", "create", "edit", "delete"],
    "users": ["view", "create", "edit", "delete"],
}


def seed_permissions(db: Session) -> Dict[str, Permission]:
    """
    Seed the default resource/action permissions (idempotent).
    """
    permissions_map = {}
    for resource, actions in PERMISSION_MATRIX.items():
        for action in actions:
            slug = f"{resource}.{action}"
            existing = (
                db.query(Permission)
                .filter(Permission.slug == slug, Permission.deleted_at.is_(None))
                .first()
            )
            if existing:
                logger.debug(f"Permission {slug} already exists.")
                permissions_map[slug] = existing
                continue

            now = utcnow()
            perm = Permission(
                name=f"{action.capitalize()} {resource}",
                slug=slug,
                resource=resource,
                action=action,
                description=f"{action.capitalize()} {resource}",
                is_active=True,
                created_at=now,
                updated_at=now,
            )
            db.add(perm)
            db.flush()  # assign ID
            permissions_map[slug] = perm
            logger.info(f"Permission {slug} created.")
    return permissions_map


def seed_roles(db: Session, permissions_map: Dict[str, Permission]) -> Dict[str, Role]:
    """
    Seed the super-admin and admin roles and grant them every default
    permission. Grants already present are left alone.
    """
    roles_def = {
        settings.SUPER_ADMIN_ROLE_SLUG: ("Super Admin", "Full access to every school resource"),
        settings.ADMIN_ROLE_SLUG: ("Admin", "School administrator"),
    }

    roles_map = {}
    for slug, (name, description) in roles_def.items():
        role = db.query(Role).filter(Role.slug == slug, Role.deleted_at.is_(None)).first()
        if not role:
            now = utcnow()
            role = Role(name=name, slug=slug, description=description, is_active=True, created_at=now, updated_at=now)
            db.add(role)
            db.flush()
            logger.info(f"Role {slug} created.")
        else:
            logger.debug(f"Role {slug} already exists.")

        granted = {
            rp.permission_id
            for rp in db.query(RolePermission).filter(RolePermission.role_id == role.id).all()
        }
        for perm in permissions_map.values():
            if perm.id not in granted:
                db.add(RolePermission(role_id=role.id, permission_id=perm.id, created_at=utcnow()))
        roles_map[slug] = role
    db.flush()
    return roles_map


def seed_super_admin_user(db: Session, role: Role, user_id: Optional[str]) -> None:
    if not user_id:
        logger.debug("No SEED_SUPER_ADMIN_USER_ID configured, skipping user assignment.")
        return
    try:
        uid = UUID(user_id)
    except ValueError:
        logger.warning(f"SEED_SUPER_ADMIN_USER_ID is not a UUID: {user_id!r}, skipping.")
        return

    existing = (
        db.query(UserRole)
        .filter(UserRole.user_id == uid, UserRole.role_id == role.id)
        .first()
    )
    if existing:
        logger.debug(f"User {uid} already holds {role.slug}.")
        return
    db.add(UserRole(user_id=uid, role_id=role.id, assigned_at=utcnow()))
    logger.info(f"User {uid} assigned role {role.slug}.")


def seed_rbac(db: Session, super_admin_user_id: Optional[str] = None) -> None:
    """
    Seed default permissions, the admin roles and optionally the first
    super-admin user, in one transaction.
    """
    try:
        permissions_map = seed_permissions(db)
        roles_map = seed_roles(db, permissions_map)
        if super_admin_user_id is None:
            super_admin_user_id = settings.SEED_SUPER_ADMIN_USER_ID
        seed_super_admin_user(db, roles_map[settings.SUPER_ADMIN_ROLE_SLUG], super_admin_user_id)
        db.commit()
        logger.info("RBAC seeding completed.")
    except Exception:
        db.rollback()
        logger.exception("RBAC seeding failed.")
        raise
