# ── Core utilities ────────────────────────────────────────────
from app.routes.core_router import router as core_router

# ── RBAC ──────────────────────────────────────────────────────
from app.routes.iam import (
    role_router,
    permission_router,
    menu_router,
    user_role_router,
    authorization_router,
)
