"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def current_env() -> str:
    return (
        os.getenv("STOREFRONT_ENV") or os.getenv("ENV") or os.getenv("ENVIRONMENT") or "development"
    ).lower()


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    database_url: str = "sqlite:///storefront.db"
    log_dir: str = "logs"
    default_page_size: int = 10
    max_page_size: int = 100
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @property
    def is_test(self) -> bool:
        return self.env == "test"


def load_settings() -> Settings:
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        env=current_env(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///storefront.db"),
        log_dir=os.getenv("LOG_DIR", "logs"),
        default_page_size=int(os.getenv("DEFAULT_PAGE_SIZE", "10")),
        max_page_size=int(os.getenv("MAX_PAGE_SIZE", "100")),
        cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
    )
