"""Configuration management for PromptPad core."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


# Storage root (defaults to ~/PromptPad)
DEFAULT_STORAGE_DIR = Path(os.path.expanduser("~/PromptPad"))

# Layout below the storage root
PROMPTS_DIRNAME = "prompts"
DEFAULT_FOLDER = "uncategorized"
INDEX_FILENAME = "index.json"
SETTINGS_FILENAME = "settings.json"
PROMPT_EXTENSION = ".md"

# File naming
SLUG_MAX_LENGTH = get_env_int("PROMPTPAD_SLUG_MAX_LENGTH", 50)

# Index snapshot format
INDEX_VERSION = 1

# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO")


def resolve_storage_root(path: Path | str | None = None) -> Path:
    """
    Resolve the storage root directory.

    Precedence: explicit argument, then PROMPTPAD_STORAGE_DIR, then ~/PromptPad.
    """
    if path:
        return Path(path).expanduser()
    env_path = get_env("PROMPTPAD_STORAGE_DIR")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_STORAGE_DIR


def setup_logging() -> logging.Logger:
    """Configure and return logger."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, (LOG_LEVEL or "INFO").upper(), logging.INFO),
    )
    return logging.getLogger(__name__)
