from dotenv import load_dotenv
import os

load_dotenv()  # take environment variables from .env


def env_get(key: str, default: str | None = None) -> str | None:
    """Get environment variable or return default."""
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def env_get_int(key: str, default: int) -> int:
    """Get environment variable as an int, raising ValueError on garbage."""
    value = env_get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {value!r}") from None
