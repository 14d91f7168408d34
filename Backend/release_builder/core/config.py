import os
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

# The .env file lives at the project root, two levels above the package.
_config_dir = os.path.dirname(os.path.abspath(__file__))
_backend_dir = os.path.dirname(os.path.dirname(_config_dir))
_project_root = os.path.dirname(_backend_dir)
_dotenv_path = os.path.join(_project_root, '.env')


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./release_builder.db"
    DATABASE_ECHO: bool = False

    # JWT settings
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    TAKEDOWN_CONFIRMATION_MINUTES: int = 5
    INVITATION_EXPIRE_HOURS: int = 72

    # Object storage (local filesystem backend)
    STORAGE_ROOT: str = os.path.join(_project_root, "storage")
    STORAGE_PUBLIC_URL: str = "http://localhost:8000/storage"

    # Used for the default label and the default track P line
    DEFAULT_LABEL_NAME: str = "Amber Records"

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=_dotenv_path,
        env_file_encoding='utf-8',
        extra='ignore'
    )

settings = Settings()
