"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


class Config:
    # App settings
    APP_NAME = os.getenv("APP_NAME", "KVISION Messaging")
    TESTING = _flag("TESTING", "false")
    DEBUG = _flag("DEBUG", "false")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH") or None
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )

    # Auth
    SERVICE_AUTH_SECRET = os.getenv("SERVICE_AUTH_SECRET", "")
    SERVICE_AUTH_ISSUER = os.getenv("SERVICE_AUTH_ISSUER", "kvision-dashboard")
    SERVICE_AUTH_AUDIENCE = os.getenv("SERVICE_AUTH_AUDIENCE", "kvision-messaging")

    # Conversation store: "redis", "supabase" or "memory"
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "redis").lower()

    # Redis settings
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    REDIS_CONVERSATIONS_KEY: str = os.getenv(
        "REDIS_CONVERSATIONS_KEY", "kvision:conversations"
    )
    REDIS_SOCKET_TIMEOUT_SECONDS: float = float(
        os.getenv("REDIS_SOCKET_TIMEOUT_SECONDS", "5")
    )

    # Supabase (PostgREST) settings
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")
    SUPABASE_CONVERSATIONS_TABLE: str = os.getenv(
        "SUPABASE_CONVERSATIONS_TABLE", "conversations"
    )
    SUPABASE_TIMEOUT_SECONDS: float = float(
        os.getenv("SUPABASE_TIMEOUT_SECONDS", "10")
    )

    # User directory
    USER_DIRECTORY_FILE: str = os.getenv("USER_DIRECTORY_FILE", "users.json")

    # Synchronizer
    MESSAGE_POLL_INTERVAL_SECONDS: float = float(
        os.getenv("MESSAGE_POLL_INTERVAL_SECONDS", "5")
    )

    # Attachments
    MAX_ATTACHMENT_MB = float(os.getenv("MAX_ATTACHMENT_MB", "5"))
    ALLOWED_ATTACHMENT_TYPES = [
        t.strip()
        for t in os.getenv(
            "ALLOWED_ATTACHMENT_TYPES",
            "image/*,application/pdf,text/plain,application/msword,"
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document,"
            "application/vnd.ms-excel,"
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ).split(",")
        if t.strip()
    ]
    # Ceiling for one stored conversation record (attachments are inlined)
    MAX_CONVERSATION_RECORD_MB = float(os.getenv("MAX_CONVERSATION_RECORD_MB", "20"))

    # Listing
    CONVERSATION_SEARCH_MAX_LENGTH: int = int(
        os.getenv("CONVERSATION_SEARCH_MAX_LENGTH", "100")
    )

    # Rate limits (slowapi syntax)
    BROADCAST_RATE_LIMIT = os.getenv("BROADCAST_RATE_LIMIT", "10/minute")


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    STORE_BACKEND = "memory"


class ProductionConfig(Config):
    """Production configuration"""

    pass


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("APP_ENV", "development")
    return config.get(env, config["default"])
