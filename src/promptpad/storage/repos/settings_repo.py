"""Settings repository - persistence for the application settings record."""

import logging
from pathlib import Path
from threading import Lock

from pydantic import ValidationError

from promptpad.core.errors import IoFailure, MalformedDocument
from promptpad.core.types import Settings
from promptpad.storage.atomic import write_text_atomic
from promptpad.vault.layout import get_settings_path

logger = logging.getLogger(__name__)


class SettingsRepo:
    """Repository for the single settings record (settings.json)."""

    def __init__(self, root: Path | str):
        """
        Initialize settings repository.

        Args:
            root: Storage root holding settings.json
        """
        self.settings_path = get_settings_path(Path(root))
        self._settings: Settings | None = None
        self._write_lock = Lock()

    def _load(self) -> Settings:
        if not self.settings_path.exists():
            logger.debug("No settings file at %s, using defaults", self.settings_path)
            return Settings()

        try:
            raw = self.settings_path.read_text(encoding="utf-8")
        except OSError as e:
            raise IoFailure(f"Cannot read {self.settings_path}: {e}") from e
        except UnicodeDecodeError as e:
            raise MalformedDocument(f"{self.settings_path} is not valid UTF-8") from e

        try:
            return Settings.model_validate_json(raw)
        except ValidationError as e:
            logger.error("Invalid settings file %s: %s", self.settings_path, e)
            raise MalformedDocument(f"Invalid settings file {self.settings_path}") from e

    def get(self) -> Settings:
        """Get settings, loading from disk (or defaults) on first access."""
        settings = self._settings
        if settings is None:
            with self._write_lock:
                if self._settings is None:
                    self._settings = self._load()
                settings = self._settings
        return settings.model_copy(deep=True)

    def update(self, settings: Settings) -> Settings:
        """Replace the whole settings record. Persists before caching."""
        new_settings = settings.model_copy(deep=True)
        with self._write_lock:
            try:
                write_text_atomic(
                    self.settings_path,
                    new_settings.model_dump_json(indent=2, exclude_none=True),
                )
            except OSError as e:
                logger.error("Failed to save settings %s: %s", self.settings_path, e)
                raise IoFailure(f"Cannot write {self.settings_path}: {e}") from e
            self._settings = new_settings

        logger.info("Settings updated")
        return new_settings.model_copy(deep=True)
