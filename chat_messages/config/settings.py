"""Application configuration with environment-based settings."""
import os
from typing import Optional
from dotenv import load_dotenv


class Config:
    """Base configuration class following Single Responsibility Principle."""

    # Load environment variables
    load_dotenv()

    # Storage Configuration
    DOCUMENT_STORAGE_TYPE: str = os.getenv("DOCUMENT_STORAGE_TYPE", "redis").lower()
    MESSAGE_KEY_PREFIX: str = os.getenv("MESSAGE_KEY_PREFIX", "message")

    # Redis Configuration
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    REDIS_MAX_CONNECTIONS: int = int(os.getenv("REDIS_MAX_CONNECTIONS", "50"))

    # Reference resolution (output enrichment only)
    REFERENCE_RESOLVER_TYPE: str = os.getenv("REFERENCE_RESOLVER_TYPE", "id").lower()
    CONVERSATION_KEY_PREFIX: str = os.getenv("CONVERSATION_KEY_PREFIX", "conversation:")
    USER_KEY_PREFIX: str = os.getenv("USER_KEY_PREFIX", "user:")

    # Monitoring
    SENTRY_DSN: Optional[str] = os.getenv("SENTRY_DSN")
    ENABLE_METRICS: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"

    # Application
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    STORAGE_TYPES = ("redis", "memory")
    RESOLVER_TYPES = ("id", "redis")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values."""
        problems = []
        if cls.DOCUMENT_STORAGE_TYPE not in cls.STORAGE_TYPES:
            problems.append(f"DOCUMENT_STORAGE_TYPE={cls.DOCUMENT_STORAGE_TYPE}")
        if cls.REFERENCE_RESOLVER_TYPE not in cls.RESOLVER_TYPES:
            problems.append(f"REFERENCE_RESOLVER_TYPE={cls.REFERENCE_RESOLVER_TYPE}")

        if problems:
            raise ValueError(f"Unsupported configuration values: {', '.join(problems)}")


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DOCUMENT_STORAGE_TYPE = "memory"
    REFERENCE_RESOLVER_TYPE = "id"
    REDIS_URL = "redis://localhost:6379/15"  # Use different DB for tests
    ENABLE_METRICS = False
    SENTRY_DSN = None


def get_config() -> type[Config]:
    """Factory method to get configuration based on environment."""
    env = os.getenv("FLASK_ENV", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }

    return config_map.get(env, DevelopmentConfig)
