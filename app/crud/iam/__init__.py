from app.crud.iam.role import role_crud
from app.crud.iam.permission import permission_crud
from app.crud.iam.menu import menu_crud
from app.crud.iam.role_permission import role_permission_crud
from app.crud.iam.user_role import user_role_crud
from app.crud.iam.role_menu import role_menu_crud
