import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core.logging_config import setup_logging, get_logger
from app.database.create_tables import create_tables
from app.database.session import SessionLocal
from app.routes import (
    core_router,
    role_router,
    permission_router,
    menu_router,
    user_role_router,
    authorization_router,
)
from app.seed.seed_rbac import seed_rbac

# Setup logging as early as possible
setup_logging(force_configure=True)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed the default roles before serving"""
    logger.info(f"{settings.APP_NAME} starting up (env={settings.ENV})")
    create_tables()
    if settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_rbac(db)
        finally:
            db.close()
    yield
    logger.info(f"{settings.APP_NAME} shutting down")


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Roles, permissions and menus for the School Management System",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Set up CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

RBAC_PREFIX = f"{settings.API_PREFIX}/rbac"

app.include_router(core_router)
app.include_router(role_router, prefix=RBAC_PREFIX)
app.include_router(permission_router, prefix=RBAC_PREFIX)
app.include_router(menu_router, prefix=RBAC_PREFIX)
app.include_router(user_role_router, prefix=RBAC_PREFIX)
app.include_router(authorization_router, prefix=RBAC_PREFIX)


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
