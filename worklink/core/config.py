from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # PostgreSQL Configuration
    postgres_user: str = Field(default="worklink")
    postgres_password: str = Field(default="worklink")
    postgres_db: str = Field(default="worklink")
    postgres_host: str = Field(default="db")
    postgres_port: int = Field(default=5432)
    # Full URL override (takes precedence over the parts above)
    database_url_override: Optional[str] = Field(default=None, alias="DATABASE_URL")

    # Application Configuration
    app_env: str = Field(default="dev")
    api_port: int = Field(default=8000)
    jwt_secret: str = Field(default="change-me-in-production-use-a-secure-random-string")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expires: int = Field(default=86400)  # 24 hours

    # Pagination
    default_page_size: int = Field(default=10)
    max_page_size: int = Field(default=50)

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"

    # CORS - allow frontend origins (filter out None values)
    allowed_origins: List[str] = [
        origin for origin in [
            "http://localhost:3000",
            os.getenv("FRONTEND_URL")
        ] if origin is not None
    ]


settings = Settings()
