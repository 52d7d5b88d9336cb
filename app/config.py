"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # Remote QC backend (presign / submit / job / results endpoints)
    api_base_url: str = "https://YOUR_API_GATEWAY_URL"
    http_timeout_seconds: Optional[float] = None  # None = wait indefinitely

    # Status polling
    poll_interval_seconds: float = 10.0

    # Dashboard service
    service_port: int = 8001
    frontend_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]
    log_level: str = "INFO"

    # Browser uploads
    max_upload_bytes: int = 5 * 1024 * 1024 * 1024  # 5 GB per file
    upload_tmp_dir: Optional[str] = None  # None = system temp dir

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
