from typing import List, Union
import logging

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    PROJECT_NAME: str = "Vehicle Export Back Office"
    API_PREFIX: str = "/api"
    COMPANY_NAME: str = "Back Office Team"

    # CORS
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Database
    DATABASE_URI: str = "sqlite:///./backoffice.db"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Booking request mail (Gmail app password relay)
    GMAIL_USER: str = ""
    GMAIL_APP_PASSWORD: str = Field(default="", description="Gmail app password, not the account password")
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587

    # Inquiry assignment release job
    ASSIGNMENT_RELEASE_ENABLED: bool = True
    ASSIGNMENT_RELEASE_DAYS: int = 30
    ASSIGNMENT_RELEASE_HOUR: int = 2  # 0-23
    ASSIGNMENT_RELEASE_MINUTE: int = 0  # 0-59

    DEFAULT_CURRENCY: str = "JPY"

    # Client side (stage workflow / kanban)
    API_BASE_URL: str = "http://127.0.0.1:8000"
    AUTOSAVE_DEBOUNCE_SECONDS: float = 1.0
    KANBAN_POLL_SECONDS: float = 30.0

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
logger.info(f"Loaded settings: API_PREFIX={settings.API_PREFIX}, CORS={settings.BACKEND_CORS_ORIGINS}")
