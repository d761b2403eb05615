"""
Centralized settings loader.
Values come from the process environment, optionally populated from a .env file.
"""
import os
import logging
from typing import List, Optional

from dotenv import load_dotenv

from corestack.exceptions import ConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)

API_KEY_VARIABLES = ("GOOGLE_API_KEY", "GEMINI_API_KEY")

DEFAULT_PRIMARY_MODEL = "gemini-2.0-flash"
DEFAULT_FALLBACK_MODEL = "gemini-1.5-flash"


def get_setting(key: str, default: Optional[str] = None) -> Optional[str]:
    """
    Get a setting value from the environment.

    Blank values are treated as unset so that an empty line in .env
    does not shadow the default.
    """
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def get_setting_int(key: str, default: int = 0) -> int:
    """Get an integer setting value."""
    value = get_setting(key)
    if value is None:
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        logger.warning(f"Setting {key}={value!r} is not an integer, using {default}")
        return default


def get_setting_list(key: str, default: Optional[List[str]] = None) -> List[str]:
    """Get a comma-separated setting as a list of non-empty strings."""
    value = get_setting(key)
    if value is None:
        return list(default or [])
    return [item.strip() for item in value.split(",") if item.strip()]


# Convenience functions for common settings
def get_api_key_source() -> Optional[str]:
    """Name of the environment variable that provides the LLM credential, if any."""
    for name in API_KEY_VARIABLES:
        if get_setting(name):
            return name
    return None


def get_api_key() -> str:
    """Get the LLM credential or fail loudly."""
    source = get_api_key_source()
    if source is None:
        raise ConfigurationError(
            "Server configuration error: API key missing. "
            "Set GOOGLE_API_KEY or GEMINI_API_KEY."
        )
    return get_setting(source)


def get_primary_model() -> str:
    return get_setting("GEMINI_PRIMARY_MODEL", DEFAULT_PRIMARY_MODEL)


def get_fallback_model() -> Optional[str]:
    return get_setting("GEMINI_FALLBACK_MODEL", DEFAULT_FALLBACK_MODEL)


def get_diagnostic_models() -> List[str]:
    defaults = [get_primary_model()]
    fallback = get_fallback_model()
    if fallback and fallback not in defaults:
        defaults.append(fallback)
    return get_setting_list("GEMINI_DIAGNOSTIC_MODELS", defaults)


def get_model_timeout() -> int:
    """Per-call deadline in seconds."""
    return get_setting_int("GEMINI_TIMEOUT_SECONDS", 60)


def get_style_source_max_chars() -> int:
    """Prefix length of CSS/description input embedded in extraction prompts."""
    return get_setting_int("STYLE_SOURCE_MAX_CHARS", 10000)


def get_output_excerpt_chars() -> int:
    return get_setting_int("MODEL_OUTPUT_EXCERPT_CHARS", 200)


def get_database_url() -> str:
    return get_setting("DATABASE_URL", "sqlite:///./corestack.db")


def get_secret_key() -> str:
    return get_setting("SECRET_KEY", "your-secret-key-change-this-in-production")


def get_access_token_expire_minutes() -> int:
    return get_setting_int("ACCESS_TOKEN_EXPIRE_MINUTES", 30)


def get_cors_origins() -> List[str]:
    return get_setting_list("CORS_ORIGINS", ["http://localhost:5173", "http://localhost:3000"])
