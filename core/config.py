from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration from environment"""
    database_url: str = "sqlite:///./discovery.db"
    youtube_api_key: Optional[str] = None
    hero_pinned_ids: str = ""
    support_salt: str = "dev-salt-change-me"
    local_utc_offset_hours: int = 9
    max_candidates: int = 1000
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def pinned_ids(self) -> List[str]:
        return [s.strip() for s in self.hero_pinned_ids.split(",") if s.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
