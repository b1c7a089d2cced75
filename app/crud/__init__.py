# Import all CRUD modules for easier access
from app.crud.iam import (
    role_crud,
    permission_crud,
    menu_crud,
    role_permission_crud,
    user_role_crud,
    role_menu_crud,
)
