from pydantic_settings import BaseSettings
from typing import List, Optional, Union
from pydantic import field_validator
import json


def _parse_list(v: Union[List[str], str]) -> List[str]:
    """Parse a list setting from a JSON string, a comma-separated string or a list"""
    if isinstance(v, str):
        try:
            return json.loads(v)
        except json.JSONDecodeError:
            # If not valid JSON, split by comma
            return [item.strip() for item in v.split(",") if item.strip()]
    return v


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    PROJECT_NAME: str = "Ledger Listings API"
    PORT: int = 3000

    # Database Settings (MySQL)
    MYSQL_DB_HOST: str = "localhost"
    MYSQL_DB_PORT: int = 3306
    MYSQL_DB_USER: str = "root"
    MYSQL_DB_PASSWORD: str = ""
    MYSQL_DB_NAME: str = "data"

    # Full SQLAlchemy URL, takes precedence over the MySQL settings (used by tests)
    DATABASE_URL_OVERRIDE: Optional[str] = None

    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (
            f"mysql+pymysql://{self.MYSQL_DB_USER}:{self.MYSQL_DB_PASSWORD}"
            f"@{self.MYSQL_DB_HOST}:{self.MYSQL_DB_PORT}/{self.MYSQL_DB_NAME}"
        )

    # JWT Settings
    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 30

    # When enabled, /api routes (except sign-in) require a bearer token
    REQUIRE_AUTH: bool = False

    # Only this user may run bulk deletes
    ADMIN_USERNAME: str = "adminangel"

    # Listing tables that may be read and bulk-deleted. Can be set as JSON string in .env
    LISTING_TABLES: Union[List[str], str] = [
        "tnledger_courts",
        "tn_public_notice_probate_notice",
        "tn_courts",
    ]

    # Server-Sent Events
    SSE_HEARTBEAT_SECONDS: float = 15.0
    SSE_QUEUE_SIZE: int = 100

    # Seconds uvicorn waits for open connections before cancelling them on shutdown
    SHUTDOWN_GRACE_SECONDS: int = 10

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # CORS Settings - can be set as JSON string in .env
    BACKEND_CORS_ORIGINS: Union[List[str], str] = ["*"]

    @field_validator("BACKEND_CORS_ORIGINS", "LISTING_TABLES", mode="before")
    @classmethod
    def parse_list_settings(cls, v: Union[List[str], str]) -> List[str]:
        return _parse_list(v)

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
