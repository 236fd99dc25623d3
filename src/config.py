import os
from typing import Optional, Union
from pydantic import BaseModel, Field
from sqlalchemy.engine import URL

DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

class DatabaseSettings(BaseModel):
    """
    Connection settings for the mirror node database.
    A full DATABASE_URL takes precedence over the individual settings.
    """
    host: str = "localhost"
    port: int = Field(5432, gt=0)
    name: str = "mirror_node"
    username: str = "mirror_node"
    password: str = ""
    url_override: Optional[str] = None

    @classmethod
    def from_env(cls) -> "DatabaseSettings":
        return cls(
            host=os.getenv("DB_HOST", "localhost"),
            port=os.getenv("DB_PORT", "5432"),
            name=os.getenv("DB_NAME", "mirror_node"),
            username=os.getenv("DB_USERNAME", "mirror_node"),
            password=os.getenv("DB_PASSWORD", ""),
            url_override=os.getenv("DATABASE_URL") or None,
        )

    @property
    def url(self) -> Union[str, URL]:
        if self.url_override:
            return self.url_override
        return URL.create(
            "postgresql+asyncpg",
            username=self.username,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.name,
        )


def get_log_level() -> str:
    """LOG_LEVEL from the environment, or INFO when unset or not a logging level name."""
    level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    return level if level in LOG_LEVELS else DEFAULT_LOG_LEVEL
