"""Factory for building the PromptLibrary with all dependencies wired.

Hosts call build_library() once at startup and hold the returned instance.
There are no module-level singletons, so tests can build independent
libraries over separate storage roots.
"""

import logging
from pathlib import Path

from promptpad.core.config import resolve_storage_root
from promptpad.core.library import PromptLibrary
from promptpad.storage.repos.index_repo import IndexRepo
from promptpad.storage.repos.settings_repo import SettingsRepo
from promptpad.vault.layout import ensure_storage_structure
from promptpad.vault.notes import PromptStore

logger = logging.getLogger(__name__)


def build_library(storage_root: Path | str | None = None) -> PromptLibrary:
    """
    Build a fully configured PromptLibrary.

    Args:
        storage_root: Storage root (defaults to $PROMPTPAD_STORAGE_DIR or ~/PromptPad)

    Returns:
        PromptLibrary over an initialized storage layout

    Raises:
        IoFailure: If the storage layout cannot be created
    """
    root = resolve_storage_root(storage_root)
    ensure_storage_structure(root)

    store = PromptStore(root)
    library = PromptLibrary(
        store=store,
        index_repo=IndexRepo(root, store),
        settings_repo=SettingsRepo(root),
    )
    logger.debug("PromptLibrary ready at %s", root)
    return library
