from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_path: Path = Path("urgent_jobs.sqlite")
    api_prefix: str = "/api"
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]

    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60 * 24 * 7

    # Notifications are written through their own session and retried
    # independently of the request that produced them.
    notification_max_attempts: int = 3

    default_page_size: int = 10
    max_page_size: int = 100

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    model_config = {"env_prefix": "URGENTJOBS_"}


settings = Settings()
