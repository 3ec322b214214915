"""Application Settings - loaded from environment variables"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings, read once at startup from the environment
    (or a .env file in the working directory).
    """

    APP_NAME: str = "Fornecedor Minimal API"
    APP_VERSION: str = "1.0.0"
    # Swagger UI is only exposed in development
    ENVIRONMENT: str = "production"

    # --- Database ---
    DATABASE_URL: str = "sqlite:///./fornecedores.db"

    # --- JWT ---
    # Must be overridden in production: openssl rand -hex 32
    JWT_SECRET_KEY: str = "dev-secret-key-change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_HOURS: int = 1
    JWT_ISSUER: str = "MinimalApi"
    JWT_VALID_AT: str = "https://localhost"

    # --- Identity lockout ---
    LOCKOUT_MAX_FAILED_ATTEMPTS: int = 3
    LOCKOUT_MINUTES: int = 5

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_COLORS: bool = True

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


settings = Settings()
