"""Application configuration via environment variables."""

import json
from typing import Dict, List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "info"
    CORS_ORIGINS: str = '["http://localhost:3000"]'
    RATE_LIMIT_DEFAULT: str = "120/minute"

    # Seed values for a policy the editor has never saved.
    # The engine itself never reads these; it is always handed a policy.
    DEFAULT_QUOTA_TYPE: str = "Monthly Quota"
    DEFAULT_ALLOCATIONS: str = '{"junior": 12, "senior": 16, "managers": 24}'
    DEFAULT_WORKING_DAYS: str = "[1, 2, 3, 4, 5, 6]"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS JSON string into a list."""
        try:
            return json.loads(self.CORS_ORIGINS)
        except (json.JSONDecodeError, TypeError):
            return ["http://localhost:3000"]

    @property
    def default_allocations(self) -> Dict[str, int]:
        """Parse DEFAULT_ALLOCATIONS JSON object (label → days)."""
        try:
            raw = json.loads(self.DEFAULT_ALLOCATIONS)
            return {str(k): int(v) for k, v in raw.items()}
        except (json.JSONDecodeError, TypeError, ValueError, AttributeError):
            return {"junior": 12, "senior": 16, "managers": 24}

    @property
    def default_working_days(self) -> List[int]:
        """Parse DEFAULT_WORKING_DAYS JSON list of weekday indices (0=Sun)."""
        try:
            return [int(d) for d in json.loads(self.DEFAULT_WORKING_DAYS)]
        except (json.JSONDecodeError, TypeError, ValueError):
            return [1, 2, 3, 4, 5, 6]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
