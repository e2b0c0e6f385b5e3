"""
Configuration settings for the COACH APP
"""

from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class CoachAppSettings(BaseSettings):
    """Configuration for the fitness coach service"""

    # Application
    app_name: str = "Fitness Coach"
    version: str = "1.0.0"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s - %(message)s"
    logs_dir: Path = Path(__file__).resolve().parent.parent / "logs"
    log_file: str = "coach_app.log"
    log_max_bytes: int = 2_000_000
    log_backup_count: int = 5

    # Database
    database_url: str = "sqlite:///./fitness_coach.db"

    # OpenAI
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("COACH_APP_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    openai_model: str = "gpt-4o-mini"
    openai_max_tokens: int = 500
    openai_temperature: float = 0.7
    langsmith_project: Optional[str] = None

    # HTTP
    http_timeout_seconds: int = 30
    cors_allow_origins: List[str] = ["*"]
    request_logging_enabled: bool = False

    class Config:
        env_file = str(Path(__file__).resolve().parent / ".env")
        env_prefix = "COACH_APP_"
        extra = "ignore"


# Global settings instance
settings = CoachAppSettings()
LOGS_DIR = settings.logs_dir
LOGS_DIR.mkdir(parents=True, exist_ok=True)
