"""
Configuration module for Pastr.
Loads environment variables and provides config objects.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings:
    """Application settings loaded from environment variables.

    Keyword arguments override individual values, which is how tests build
    an isolated configuration.
    """

    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    RATE_LIMIT_REDIS_URL: str = os.getenv("RATE_LIMIT_REDIS_URL", "")
    REDIS_SOCKET_TIMEOUT: float = float(os.getenv("REDIS_SOCKET_TIMEOUT", "5"))
    ALLOW_MEMORY_FALLBACK: bool = _env_bool("ALLOW_MEMORY_FALLBACK", "True")
    DEBUG: bool = _env_bool("DEBUG", "False")

    # Keys
    KEY_STRATEGY: str = os.getenv("KEY_STRATEGY", "uuid")
    MAX_KEY_ATTEMPTS: int = int(os.getenv("MAX_KEY_ATTEMPTS", "5"))

    # Content policy
    MAX_PASTE_BYTES: int = int(os.getenv("MAX_PASTE_BYTES", str(512 * 1024)))

    # Rate limiting
    CREATE_RATE_LIMIT: int = int(os.getenv("CREATE_RATE_LIMIT", "10"))
    RETRIEVE_RATE_LIMIT: int = int(os.getenv("RETRIEVE_RATE_LIMIT", "60"))
    RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
    RATE_LIMIT_PREFIX_LENGTH: int = int(os.getenv("RATE_LIMIT_PREFIX_LENGTH", "20"))
    RATE_LIMIT_FAIL_OPEN: bool = _env_bool("RATE_LIMIT_FAIL_OPEN", "False")

    # Failure notifications
    NOTIFY_WEBHOOK_URL: str = os.getenv("NOTIFY_WEBHOOK_URL", "")
    NOTIFY_WEBHOOK_TOKEN: str = os.getenv("NOTIFY_WEBHOOK_TOKEN", "")
    NOTIFY_TIMEOUT: float = float(os.getenv("NOTIFY_TIMEOUT", "5"))

    def __init__(self, **overrides):
        for name, value in overrides.items():
            if not hasattr(self, name):
                raise AttributeError(f"Unknown setting: {name}")
            setattr(self, name, value)

    @property
    def rate_limit_redis_url(self) -> str:
        """Limiter backend URL; shares the paste store's Redis unless set."""
        return self.RATE_LIMIT_REDIS_URL or self.REDIS_URL
