from pathlib import Path
from typing import Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WARMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Map Geometry Configuration
    hex_size: float = Field(default=1000.0, gt=0, description="Hex circumradius in global units")
    calibration_file: Optional[str] = Field(
        default=None, description="JSON file with per-hex affine calibration overrides"
    )

    # War API Configuration
    default_shard: str = Field(default="able", description="Shard used when none is requested")
    able_url: str = Field(
        default="https://war-service-live.foxholeservices.com/api", description="Able shard API root"
    )
    baker_url: str = Field(
        default="https://war-service-live-2.foxholeservices.com/api", description="Baker shard API root"
    )
    charlie_url: str = Field(
        default="https://war-service-live-3.foxholeservices.com/api", description="Charlie shard API root"
    )
    request_timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")

    # Performance Configuration
    max_workers: int = Field(default=4, ge=1, description="Threads used for per-hex tessellation")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    @property
    def shard_urls(self) -> dict:
        """Map of shard name to API root URL."""
        return {
            "able": self.able_url,
            "baker": self.baker_url,
            "charlie": self.charlie_url,
        }


# Instantiate singleton settings object
settings = Settings()
