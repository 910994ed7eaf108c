# backend/salon_booking/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repository root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/salon.db"
    redis_url: str = "redis://localhost:6379/0"

    # Salon-local wall clock used for "today" / "current hour" gates
    timezone: str = "Asia/Tokyo"

    # Document id of the reservation settings in the configuration store
    schedule_id: str = "reservation"

    # Read-path timeouts (seconds); on expiry callers degrade, never fail
    settings_fetch_timeout: float = 2.0
    bookings_fetch_timeout: float = 3.0
    month_precise_budget: float = 4.0
    fetch_workers: int = 8

    # Redis read-through cache for normalized settings
    settings_cache_ttl: int = 30

    # Optimistic admission retries on concurrent writers
    admission_max_attempts: int = 5

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative sqlite paths are resolved against the repository root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
