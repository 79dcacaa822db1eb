"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


class Config:
    TESTING = os.getenv("TESTING", "false").lower() in _TRUTHY
    DEBUG = os.getenv("DEBUG", "false").lower() in _TRUTHY

    # Tenant namespace for every store path
    APP_ID = os.getenv("APP_ID", "cjc-default-app-id")

    # Document store: "memory" (local/dev/tests) or "redis"
    STORE_BACKEND = os.getenv("STORE_BACKEND", "memory").lower()
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    REDIS_SOCKET_TIMEOUT: float = float(os.getenv("REDIS_SOCKET_TIMEOUT", "5.0"))

    # Generative completion service (Gemini generateContent)
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-preview-09-2025")
    GEMINI_BASE_URL = os.getenv(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )
    LLM_TIMEOUT: float = float(os.getenv("LLM_TIMEOUT", "40.0"))
    LLM_CONNECT_TIMEOUT: float = float(os.getenv("LLM_CONNECT_TIMEOUT", "10.0"))

    # Assistant orchestration
    ASSISTANT_MAX_ATTEMPTS: int = int(os.getenv("ASSISTANT_MAX_ATTEMPTS", "5"))
    # Seconds; delay for attempt n is BASE * 2**n plus up to one BASE of jitter
    ASSISTANT_BACKOFF_BASE: float = float(os.getenv("ASSISTANT_BACKOFF_BASE", "1.0"))
    ASSISTANT_WEB_GROUNDING = (
        os.getenv("ASSISTANT_WEB_GROUNDING", "true").lower() in _TRUTHY
    )

    # Context windows
    SUMMARY_WINDOW: int = int(os.getenv("SUMMARY_WINDOW", "30"))
    CONVERSATION_MESSAGE_LIMIT: int = int(
        os.getenv("CONVERSATION_MESSAGE_LIMIT", "200")
    )

    # Auth
    SERVICE_AUTH_SECRET = os.getenv("SERVICE_AUTH_SECRET", "")
    SERVICE_AUTH_ISSUER = os.getenv("SERVICE_AUTH_ISSUER", "your_service_name")
    SERVICE_AUTH_AUDIENCE = os.getenv("SERVICE_AUTH_AUDIENCE", "your_service_audience")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH") or None
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s [%(levelname)s] [%(correlation_id)s] %(name)s: %(message)s",
    )

    # Server
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "5001"))


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    STORE_BACKEND = "memory"


class ProductionConfig(Config):
    """Production configuration"""

    STORE_BACKEND = os.getenv("STORE_BACKEND", "redis").lower()


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
