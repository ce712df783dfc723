"""
Pipeline configuration

Settings are read from the environment (and a local .env file via
python-dotenv). Every field has a default so a bare checkout runs as-is.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .env import env_get, env_get_int

DEFAULT_API_URL = (
    "https://api.hygiene-monitor.de/openData/getCovidOpenDataByDateRange"
)
DEFAULT_STORE_PATH = "data/data.json"
DEFAULT_BOOTSTRAP_START = date(2022, 2, 1)
DEFAULT_TIMEOUT = 30
DEFAULT_MAX_RETRIES = 0
DEFAULT_SCHEDULE_TIME = "06:00"
DEFAULT_LOG_DIR = "logs"


@dataclass
class PipelineConfig:
    api_url: str = DEFAULT_API_URL
    store_path: str = DEFAULT_STORE_PATH
    bootstrap_start: date = DEFAULT_BOOTSTRAP_START
    timeout: int = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    schedule_time: str = DEFAULT_SCHEDULE_TIME
    log_level: str = "INFO"
    log_dir: str = DEFAULT_LOG_DIR

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.max_retries < 0:
            raise ValueError(
                f"max_retries must not be negative, got {self.max_retries}"
            )


def _parse_bootstrap_start(value: Optional[str]) -> date:
    if value is None:
        return DEFAULT_BOOTSTRAP_START
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(
            f"WASTEWATER_BOOTSTRAP_START must be YYYY-MM-DD, got {value!r}"
        ) from None


def load_config(**overrides) -> PipelineConfig:
    """
    Build the pipeline configuration from environment variables

    Args:
        **overrides: Explicit values (e.g. from CLI flags) that win over
            the environment. None values are ignored.

    Returns:
        PipelineConfig: Resolved configuration
    """
    values = {
        "api_url": env_get("WASTEWATER_API_URL", DEFAULT_API_URL),
        "store_path": env_get("WASTEWATER_STORE_PATH", DEFAULT_STORE_PATH),
        "bootstrap_start": _parse_bootstrap_start(
            env_get("WASTEWATER_BOOTSTRAP_START")
        ),
        "timeout": env_get_int("WASTEWATER_TIMEOUT", DEFAULT_TIMEOUT),
        "max_retries": env_get_int("WASTEWATER_MAX_RETRIES", DEFAULT_MAX_RETRIES),
        "schedule_time": env_get("WASTEWATER_SCHEDULE_TIME", DEFAULT_SCHEDULE_TIME),
        "log_level": env_get("LOG_LEVEL", "INFO").upper(),
        "log_dir": env_get("WASTEWATER_LOG_DIR", DEFAULT_LOG_DIR),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return PipelineConfig(**values)
