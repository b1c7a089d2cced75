from app.routes.iam.role_router import router as role_router
from app.routes.iam.permission_router import router as permission_router
from app.routes.iam.menu_router import router as menu_router
from app.routes.iam.user_role_router import router as user_role_router
from app.routes.iam.authorization_router import router as authorization_router
