# app/config.py
from pydantic_settings import BaseSettings
from typing import Optional
from pydantic import Field

class Settings(BaseSettings):
    DATABASE_URL: str = Field("sqlite+aiosqlite:///./staff.db")
    SQLALCHEMY_DATABASE_URL: Optional[str] = None
    DB_ECHO: bool = Field(False)

    # Bounds both connection setup and every individual store call (seconds).
    DB_TIMEOUT_SECONDS: float = Field(5.0)

    LOG_LEVEL: str = Field("INFO")

    DEFAULT_PAGE_SIZE: int = Field(20)
    MAX_PAGE_SIZE: int = Field(100)

    # Recorded as the acting identity when no X-Staff-Identity header is sent.
    PLACEHOLDER_IDENTITY: str = Field("system")

    model_config = {
        "env_file": ".env",
        "extra": "allow",
    }

    @property
    def effective_database_url(self) -> str:
        url = self.SQLALCHEMY_DATABASE_URL or self.DATABASE_URL

        # Ensure asyncpg is used
        if url.startswith("postgresql://") and "+asyncpg" not in url:
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

settings = Settings()
