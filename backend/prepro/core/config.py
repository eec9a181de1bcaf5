import os
from typing import Optional

from pydantic_settings import BaseSettings

from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "Pre-Pro Shot List API"
    API_V1_PREFIX: str = "/api/v1"

    # For local dev you can use sqlite:
    # SQLALCHEMY_DATABASE_URI: str = "sqlite:///./prepro.db"
    SQLALCHEMY_DATABASE_URI: str = os.getenv(
        "DATABASE_URL", "sqlite:///./prepro.db"
    )

    # Language model
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_TIMEOUT_SECONDS: float = 120.0

    # Image search provider
    PEXELS_API_KEY: Optional[str] = None
    PEXELS_BASE_URL: str = "https://api.pexels.com/v1"
    PEXELS_TIMEOUT_SECONDS: float = 15.0

    # Reference selection
    CANDIDATE_QUOTA: int = 9
    REFERENCES_PER_SHOT: int = 3

    # How much of the script is sent along as context
    STYLE_SCRIPT_EXCERPT_CHARS: int = 2000
    SHOT_SCRIPT_EXCERPT_CHARS: int = 4000

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
