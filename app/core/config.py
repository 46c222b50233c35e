from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Application settings
    ENVIRONMENT: str = "development"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3000

    # Database settings
    POSTGRES_USER: str = "archivist"
    POSTGRES_PASSWORD: str = "Passw0rd"
    POSTGRES_DB: str = "arcane_archives"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    DATABASE_URL_OVERRIDE: Optional[str] = None  # any async SQLAlchemy URL, e.g. sqlite+aiosqlite:///./archives.db
    SQL_ECHO: bool = False  # Set to True for SQL query debugging

    # Upload settings
    UPLOAD_DIR: str = "public/uploads"
    UPLOAD_URL_PREFIX: str = "/uploads/"
    MAX_UPLOAD_SIZE: int = 100 * 1024 * 1024  # 100MB limit for larger books

    FRONTEND_URL: str = "http://localhost:3000"

    # Rate limiting (production only); any limits storage URI, e.g. redis://localhost:6379
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
