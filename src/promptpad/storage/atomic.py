"""Atomic file writes shared by every persisted PromptPad file."""

import os
import tempfile
from pathlib import Path


def write_text_atomic(path: Path, content: str) -> None:
    """Write *content* to *path* atomically (temp -> rename).

    The target is either left untouched or fully replaced; readers never see
    a partially written file. Raises OSError on failure.
    """
    # Write to a temp file in the same directory, then rename
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up temp file on error
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
