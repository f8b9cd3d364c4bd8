import json
import logging
from typing import Annotated, Any, List, Optional, Union

from pydantic import Field, SecretStr, ValidationInfo, computed_field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Blogsite"
    VERSION: str = "1.0.0"

    # NoDecode: comma-separated env values reach assemble_cors_origins untouched
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = [
        "http://localhost",
        "http://localhost:5000",
        "http://localhost:5173",
    ]

    ENVIRONMENT: str = Field(default="development")
    LOG_LEVEL: str = Field(default="INFO")

    # "memory" keeps everything in process, "database" goes through SQLAlchemy
    STORAGE_BACKEND: str = Field(default="memory")

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "blogsite"
    POSTGRES_PASSWORD: SecretStr = Field(default=SecretStr(""))
    POSTGRES_DB: str = "blogsite"
    POSTGRES_PORT: int = Field(default=5432)
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)

    DB_POOL_SIZE: int = Field(default=5, ge=1)
    DB_MAX_OVERFLOW: int = Field(default=10, ge=0)
    DB_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = True
    STORAGE_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    SEED_DEFAULT_DATA: bool = True

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @field_validator("STORAGE_BACKEND", mode="before")
    @classmethod
    def normalise_backend(cls, v: str) -> str:
        v = str(v).strip().lower()
        if v not in ("memory", "database"):
            raise ValueError("STORAGE_BACKEND must be 'memory' or 'database'")
        return v

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> Any:
        if isinstance(v, str) and v:
            return v
        if info.data.get("ENVIRONMENT") == "production":
            password = info.data.get("POSTGRES_PASSWORD")
            if isinstance(password, SecretStr):
                password = password.get_secret_value()
            return (
                f"postgresql+asyncpg://{info.data.get('POSTGRES_USER')}:{password}"
                f"@{info.data.get('POSTGRES_SERVER')}:{info.data.get('POSTGRES_PORT', 5432)}"
                f"/{info.data.get('POSTGRES_DB') or ''}"
            )
        return "sqlite+aiosqlite:///./blogsite.db"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


def get_settings(**overrides: Any) -> Settings:
    if overrides:
        return Settings(**overrides)
    return Settings()


def log_settings(current: Settings) -> None:
    logger.info("Settings loaded:")
    for field, value in current.model_dump().items():
        if isinstance(value, SecretStr):
            logger.info(f"{field}: [REDACTED]")
        elif field == "DATABASE_URL" and value and "@" in value:
            # user:password@host
            logger.info(f"{field}: {value.split('://')[0]}://[REDACTED]@{value.rsplit('@', 1)[1]}")
        else:
            logger.info(f"{field}: {value}")


settings = get_settings()
