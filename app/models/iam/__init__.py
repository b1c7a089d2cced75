from app.models.iam.lifecycle import LifecycleMixin
from app.models.iam.role import Role
from app.models.iam.permission import Permission
from app.models.iam.menu import Menu
from app.models.iam.role_permission import RolePermission
from app.models.iam.user_role import UserRole
from app.models.iam.role_menu import RoleMenu
