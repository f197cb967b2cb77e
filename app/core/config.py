from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./customers.db"
    SQL_ECHO: bool = False

    # Application
    APP_NAME: str = "Customer Manager"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Paging
    DEFAULT_PAGE_LIMIT: int = 10
    ADDRESS_SEARCH_PAGE_LIMIT: int = 20
    MAX_PAGE_LIMIT: int = 100

    # Set to False when the database cannot run multi-statement transactions
    CASCADE_USE_TRANSACTIONS: bool = True

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
