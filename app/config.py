import os
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    ENV: str = os.getenv("ENV", "development")  # development, dev-server, production
    DEBUG: bool = ENV in ["development", "dev-server"]

    # Database settings
    POSTGRES_HOST: str = os.getenv("POSTGRES_HOST", "localhost")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "schooladmin")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "schoolpass")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "school_db")
    POSTGRES_PORT: int = int(os.getenv("POSTGRES_PORT", "5432"))
    DATABASE_URL: str = os.getenv("DATABASE_URL", f"postgresql://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}")

    # Database connection pool settings
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "20"))
    DB_POOL_TIMEOUT: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "3600"))

    # Server-side cancellation of queries that outlive their request (0 disables)
    DB_STATEMENT_TIMEOUT_MS: int = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "15000"))

    # Auth settings
    SECRET_KEY: str = os.getenv("SECRET_KEY", "supersecretkey")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60*24

    # RBAC settings
    SUPER_ADMIN_ROLE_SLUG: str = os.getenv("SUPER_ADMIN_ROLE_SLUG", "super-admin")
    ADMIN_ROLE_SLUG: str = os.getenv("ADMIN_ROLE_SLUG", "admin")
    SEED_ON_STARTUP: bool = os.getenv("SEED_ON_STARTUP", "true").lower() == "true"
    SEED_SUPER_ADMIN_USER_ID: str = os.getenv("SEED_SUPER_ADMIN_USER_ID", "")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_SQL: bool = os.getenv("LOG_SQL", "false").lower() == "true"
    LOG_COLORS: bool = os.getenv("LOG_COLORS", "true").lower() == "true"

    # API specific settings
    API_PREFIX: str = "/api/v1"
    APP_NAME: str = "School Management RBAC"
    APP_VERSION: str = "1.0.0"

    class Config:
        case_sensitive = True
        env_file = None

settings = Settings()
