from typing import List, Optional
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: Optional[str] = None

    # Discrete connection settings, used when DATABASE_URL is not given
    DB_HOST: Optional[str] = None
    DB_PORT: int = 5432
    DB_USER: Optional[str] = None
    DB_PASSWORD: Optional[str] = None
    DB_NAME: Optional[str] = None

    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB

    PORT: int = 3001
    ENVIRONMENT: str = "development"  # "development" or "production"
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @model_validator(mode="after")
    def assemble_database_url(self):
        if not self.DATABASE_URL and self.DB_HOST and self.DB_NAME:
            credentials = self.DB_USER or ""
            if self.DB_PASSWORD:
                credentials = f"{credentials}:{self.DB_PASSWORD}"
            if credentials:
                credentials = f"{credentials}@"
            self.DATABASE_URL = (
                f"postgresql+psycopg2://{credentials}{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        return self

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


settings = Settings()
