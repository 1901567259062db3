"""Index repository - the derived prompt index cached in memory and on disk.

The index is never the source of truth. Every mutation writes index.json
first and swaps the in-memory snapshot second, so a failed write leaves
memory in its pre-operation state. A full rebuild from the prompt files is
the only way to repair drift (external edits, a crash between a prompt write
and its index update, or a corrupt index.json).
"""

import logging
from datetime import datetime
from pathlib import Path
from threading import Lock
from uuid import UUID

from pydantic import ValidationError

from promptpad.core.config import INDEX_VERSION
from promptpad.core.errors import IoFailure, MalformedDocument, NotFound
from promptpad.core.types import PromptIndex, PromptMetadata, PromptRepository, utc_now
from promptpad.storage.atomic import write_text_atomic
from promptpad.vault.layout import get_index_path

logger = logging.getLogger(__name__)


def _as_uuid(prompt_id: UUID | str) -> UUID | None:
    if isinstance(prompt_id, UUID):
        return prompt_id
    try:
        return UUID(str(prompt_id))
    except ValueError:
        return None


class IndexRepo:
    """Repository for the prompt index snapshot.

    Unloaded until the first get() (or mutation), Loaded afterwards. Writers
    are serialized by a lock held through read-modify-persist-swap; readers
    take the lock only for the first load, then observe either the old or
    the new snapshot without blocking.
    """

    def __init__(self, root: Path | str, store: PromptRepository):
        """
        Initialize index repository.

        Args:
            root: Storage root holding index.json
            store: Authoritative prompt store used by rebuild()
        """
        self.root = Path(root)
        self.store = store
        self.index_path = get_index_path(self.root)
        self._index: PromptIndex | None = None
        self._write_lock = Lock()

    @property
    def is_loaded(self) -> bool:
        return self._index is not None

    def _load(self) -> PromptIndex:
        """Load index.json, or an empty default snapshot when absent."""
        if not self.index_path.exists():
            logger.debug("No index file at %s", self.index_path)
            return PromptIndex()

        try:
            raw = self.index_path.read_text(encoding="utf-8")
        except OSError as e:
            raise IoFailure(f"Cannot read {self.index_path}: {e}") from e
        except UnicodeDecodeError as e:
            raise MalformedDocument(f"{self.index_path} is not valid UTF-8") from e

        try:
            index = PromptIndex.model_validate_json(raw)
        except ValidationError as e:
            logger.error("Invalid index file %s: %s", self.index_path, e)
            raise MalformedDocument(f"Invalid index file {self.index_path}") from e

        logger.debug("Loaded index with %d prompts", len(index.prompts))
        return index

    def _current(self) -> PromptIndex:
        # Caller holds _write_lock
        if self._index is None:
            self._index = self._load()
        return self._index

    def _snapshot(self) -> PromptIndex:
        """Current snapshot for readers. Only the first load takes the lock."""
        snapshot = self._index
        if snapshot is None:
            with self._write_lock:
                snapshot = self._current()
        return snapshot

    def _commit(self, index: PromptIndex) -> None:
        """Persist then swap. Memory is untouched if the write fails."""
        try:
            write_text_atomic(self.index_path, index.model_dump_json(indent=2))
        except OSError as e:
            logger.error("Failed to save index %s: %s", self.index_path, e)
            raise IoFailure(f"Cannot write {self.index_path}: {e}") from e
        self._index = index

    def get(self) -> PromptIndex:
        """Get the current index (from memory, or disk on first access)."""
        return self._snapshot().model_copy(deep=True)

    def reload(self) -> PromptIndex:
        """Drop the in-memory snapshot and load index.json again."""
        with self._write_lock:
            self._index = None
            return self._current().model_copy(deep=True)

    def get_entry(self, prompt_id: UUID | str) -> PromptMetadata:
        """Get one index entry by id."""
        target = _as_uuid(prompt_id)
        for entry in self._snapshot().prompts:
            if entry.id == target:
                return entry.model_copy(deep=True)
        raise NotFound(f"Prompt not in index: {prompt_id}")

    def rebuild(self) -> PromptIndex:
        """Rebuild the index from the prompt files, discarding prior drift."""
        with self._write_lock:
            prompts = self.store.scan_all()
            index = PromptIndex(
                version=INDEX_VERSION,
                updated_at=utc_now(),
                prompts=prompts,
                folders=sorted({p.folder for p in prompts if p.folder}),
                tags=sorted({tag for p in prompts for tag in p.tags}),
            )
            self._commit(index)

        logger.info(
            f"Index rebuilt: prompts={len(index.prompts)}, "
            f"folders={len(index.folders)}, tags={len(index.tags)}"
        )
        return index.model_copy(deep=True)

    def upsert(self, metadata: PromptMetadata) -> None:
        """Insert or replace the entry for metadata.id."""
        with self._write_lock:
            index = self._current().model_copy(deep=True)
            index.prompts = [p for p in index.prompts if p.id != metadata.id]
            index.prompts.append(metadata.model_copy(deep=True))

            # Known folders and tags only grow until the next rebuild
            if metadata.folder and metadata.folder not in index.folders:
                index.folders.append(metadata.folder)
                index.folders.sort()
            new_tags = [t for t in dict.fromkeys(metadata.tags) if t not in index.tags]
            if new_tags:
                index.tags.extend(new_tags)
                index.tags.sort()

            index.updated_at = utc_now()
            self._commit(index)

        logger.debug("Index entry upserted: %s", metadata.id)

    def remove(self, prompt_id: UUID | str) -> None:
        """Remove the entry for prompt_id. Unknown ids are a no-op."""
        target = _as_uuid(prompt_id)
        with self._write_lock:
            current = self._current()
            if not any(p.id == target for p in current.prompts):
                logger.debug("Index remove: no entry for %s", prompt_id)
                return

            index = current.model_copy(deep=True)
            index.prompts = [p for p in index.prompts if p.id != target]
            index.updated_at = utc_now()
            self._commit(index)

        logger.debug("Index entry removed: %s", prompt_id)

    def bump_usage(self, prompt_id: UUID | str, used_at: datetime | None = None) -> None:
        """
        Reflect a recorded usage in the index.

        The prompt file has already been updated by the store; this is a
        best-effort mirror, so an unknown id is a no-op.
        """
        target = _as_uuid(prompt_id)
        with self._write_lock:
            index = self._current().model_copy(deep=True)
            entry = next((p for p in index.prompts if p.id == target), None)
            if entry is None:
                logger.debug("Index bump_usage: no entry for %s", prompt_id)
                return

            entry.use_count += 1
            entry.last_used_at = used_at or utc_now()
            index.updated_at = utc_now()
            self._commit(index)
