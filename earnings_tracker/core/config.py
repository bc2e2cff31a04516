from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List, Literal
from functools import lru_cache


class Settings(BaseSettings):
    # Configuración de la aplicación
    APP_NAME: str = "Weekly Earnings Tracker API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Configuración de la base de datos
    DATABASE_URL: str = "sqlite:///./earnings.db"
    DB_ECHO: bool = False
    # "sql" guarda las semanas en DATABASE_URL, "memory" solo vive en el proceso
    STORAGE_BACKEND: Literal["sql", "memory"] = "sql"

    # Semana de lunes a domingo en GMT+2 (sin horario de verano)
    WEEK_UTC_OFFSET_HOURS: int = 2
    CURRENCY: str = "RON"

    # Configuración CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_CREDENTIALS: bool = True
    CORS_METHODS: List[str] = ["*"]
    CORS_HEADERS: List[str] = ["*"]

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


@lru_cache()
def get_settings():
    return Settings()


settings = get_settings()
