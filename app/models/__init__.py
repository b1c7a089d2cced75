# Import all models here for easier access
from app.models.iam import (
    LifecycleMixin,
    Role,
    Permission,
    Menu,
    RolePermission,
    UserRole,
    RoleMenu,
)
