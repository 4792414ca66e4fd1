# aqua/core/config.py

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str

    # If DEV and you hit SSL cert issues, set DB_SSL_VERIFY=false in .env
    DB_SSL_VERIFY: bool = True

    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    SUPER_ADMIN_EMAIL: str | None = None
    SUPER_ADMIN_PASSWORD: str | None = None
    SUPER_ADMIN_NAME: str | None = "Super Admin"
    ENV: str = "dev"  # "dev" or "prod"

    # Rate limiter storage; in-memory when unset
    REDIS_URL: str | None = None
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "10/minute"

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Polling period advertised to dashboard clients
    DASHBOARD_REFRESH_SECONDS: int = 30
    TECHNICIAN_WORKDAY_HOURS: float = 8

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
