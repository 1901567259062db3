"""Storage layout and path helpers.

Layout under the storage root::

    index.json
    settings.json
    prompts/
        uncategorized/
            daily-standup.md
        <folder>/
            <slug>.md

Folders are exactly one level deep.
"""

import logging
from pathlib import Path

from promptpad.core.config import (
    DEFAULT_FOLDER,
    INDEX_FILENAME,
    PROMPT_EXTENSION,
    PROMPTS_DIRNAME,
    SETTINGS_FILENAME,
    SLUG_MAX_LENGTH,
)
from promptpad.core.errors import IoFailure

logger = logging.getLogger(__name__)


def get_prompts_dir(root: Path) -> Path:
    """
    Get the prompts directory path.

    Args:
        root: Storage root directory

    Returns:
        Path to the prompts directory
    """
    return root / PROMPTS_DIRNAME


def get_index_path(root: Path) -> Path:
    """Get the index snapshot file path."""
    return root / INDEX_FILENAME


def get_settings_path(root: Path) -> Path:
    """Get the settings file path."""
    return root / SETTINGS_FILENAME


def get_folder_path(root: Path, folder: str) -> Path:
    """Get the directory for a folder name."""
    return get_prompts_dir(root) / folder


def ensure_storage_structure(root: Path) -> None:
    """
    Ensure the storage directory structure exists.

    Creates the root, the prompts directory and the default folder.
    Safe to call multiple times.

    Raises:
        IoFailure: If any directory cannot be created
    """
    try:
        get_folder_path(root, DEFAULT_FOLDER).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Failed to initialize storage at %s: %s", root, e)
        raise IoFailure(f"Cannot initialize storage at {root}: {e}") from e


def slugify(name: str) -> str:
    """
    Derive a filesystem-safe file stem from a prompt name.

    Characters other than alphanumerics, space, hyphen and underscore become
    hyphens; the result is lower-cased, spaces become hyphens and the length
    is bounded.
    """
    safe = "".join(c if c.isalnum() or c in "-_ " else "-" for c in name)
    slug = safe.lower().replace(" ", "-")[:SLUG_MAX_LENGTH]
    return slug or "untitled"


def list_folders(root: Path) -> list[str]:
    """
    List all folders in the prompts directory.

    Returns:
        Sorted list of folder names
    """
    prompts_dir = get_prompts_dir(root)
    if not prompts_dir.exists():
        return []
    try:
        return sorted(
            d.name
            for d in prompts_dir.iterdir()
            if d.is_dir() and not d.name.startswith(".")
        )
    except OSError as e:
        raise IoFailure(f"Cannot list folders in {prompts_dir}: {e}") from e


def list_prompt_files(root: Path) -> list[Path]:
    """
    List every prompt file, one level below each folder.

    Returns:
        Sorted list of prompt file paths
    """
    prompts_dir = get_prompts_dir(root)
    if not prompts_dir.exists():
        return []
    return sorted(
        p
        for p in prompts_dir.glob(f"*/*{PROMPT_EXTENSION}")
        if p.is_file() and not p.parent.name.startswith(".")
    )


def relative_path(root: Path, path: Path) -> str:
    """Path of a prompt file relative to the storage root, POSIX style."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
