from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database Connection
    DATABASE_URL: str = "sqlite:///./bikeshop.db"

    # Store API used by the report view repositories
    STORE_API_URL: str = "http://localhost:8000/api"
    STORE_TIMEOUT: float = 10.0

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
