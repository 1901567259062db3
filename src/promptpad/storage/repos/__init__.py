"""Repository classes for the derived index and the settings record."""

from promptpad.storage.repos.index_repo import IndexRepo
from promptpad.storage.repos.settings_repo import SettingsRepo

__all__ = [
    "IndexRepo",
    "SettingsRepo",
]
