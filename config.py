from pydantic import BaseModel
from typing import List, Optional
from pathlib import Path
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent
PRODUCTION_DB_PATH = "/opt/render/project/src/tasks.db"


def _parse_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Settings(BaseModel):
    """Runtime settings for the task API"""
    environment: str = "development"
    database_url: str = f"sqlite:///{BASE_DIR / 'tasks.db'}"
    cors_origins: List[str] = ["http://localhost:3000"]
    host: str = "127.0.0.1"
    port: int = 3001
    db_echo: bool = False
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables

        Returns:
            Settings populated from the process environment (and .env)
        """
        environment = os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development"

        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            db_path = PRODUCTION_DB_PATH if environment == "production" else str(BASE_DIR / "tasks.db")
            database_url = f"sqlite:///{db_path}"

        return cls(
            environment=environment,
            database_url=database_url,
            cors_origins=_parse_origins(os.getenv("CORS_ORIGINS", "http://localhost:3000")),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "3001")),
            db_echo=_parse_bool(os.getenv("DB_ECHO")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
