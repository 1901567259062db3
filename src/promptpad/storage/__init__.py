"""Storage layer for PromptPad - atomic file writes and repositories."""

from promptpad.storage.atomic import write_text_atomic
from promptpad.storage.repos import IndexRepo, SettingsRepo

__all__ = [
    "write_text_atomic",
    "IndexRepo",
    "SettingsRepo",
]
