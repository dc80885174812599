from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Probe endpoint paths
    health_liveness_pattern: str = "/live"
    health_readyness_pattern: str = "/ready"

    # Static key/value data echoed in every ?full=1 response (JSON object in env)
    health_metadata: dict[str, str] = {}

    # Checks registered by the standalone server (name -> target, JSON in env)
    health_ready_urls: dict[str, str] = {}  # HTTP GET must answer 200
    health_ready_tcp: dict[str, str] = {}  # host:port must accept connections
    health_max_threads: int = 0  # liveness thread ceiling; 0 disables
    health_check_timeout: float = 5.0  # seconds, per network check

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"


settings = Settings()
