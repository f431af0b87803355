from typing import List
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    mongodb_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "telemetry"
    telemetry_collection: str = "telemetries"
    host: str = "0.0.0.0"
    port: int = 3000
    storage_timeout_ms: int = 5000
    display_timezone: str = "America/Mexico_City"
    poll_min_seconds: int = 4
    poll_max_seconds: int = 60
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @model_validator(mode="after")
    def check_poll_range(self):
        if self.poll_min_seconds > self.poll_max_seconds:
            raise ValueError("POLL_MIN_SECONDS must not exceed POLL_MAX_SECONDS")
        return self
