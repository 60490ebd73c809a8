# backend/config.py
from decimal import Decimal
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./database_tableorder.db"

    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Flat VAT applied on bill subtotals; differs per deployment
    VAT_RATE: Decimal = Decimal("0.14")

    # How many times a mutation is re-run after a concurrent write on the same row
    STALE_WRITE_RETRIES: int = 3

    LOG_LEVEL: str = "INFO"
    FRONTEND_URL: Optional[str] = None

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()

# Dependencies so routes get deployment values injected (and tests can override them)
def get_vat_rate() -> Decimal:
    return settings.VAT_RATE

def get_retry_attempts() -> int:
    return settings.STALE_WRITE_RETRIES
