"""Prompt file management - the authoritative store.

Each prompt is one Markdown file under ``prompts/<folder>/``. Files are
located by scanning and decoding, never by trusting the file name: the id
in the frontmatter is the only key.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

from promptpad.core.config import DEFAULT_FOLDER, PROMPT_EXTENSION
from promptpad.core.errors import (
    InvalidInput,
    IoFailure,
    MalformedDocument,
    NotFound,
    PromptPadError,
)
from promptpad.core.types import (
    CreatePromptInput,
    Prompt,
    PromptFrontmatter,
    PromptMetadata,
    UpdatePromptInput,
    utc_now,
)
from promptpad.storage.atomic import write_text_atomic
from promptpad.vault.frontmatter import (
    parse_frontmatter,
    parse_loose_frontmatter,
    write_frontmatter,
)
from promptpad.vault.layout import (
    get_folder_path,
    get_prompts_dir,
    list_folders,
    list_prompt_files,
    relative_path,
    slugify,
)

logger = logging.getLogger(__name__)


def parse_prompt_id(prompt_id: UUID | str) -> UUID:
    """Coerce an id to UUID. A string that is not a UUID names no prompt."""
    if isinstance(prompt_id, UUID):
        return prompt_id
    try:
        return UUID(str(prompt_id))
    except ValueError as e:
        raise NotFound(f"Prompt not found: {prompt_id}") from e


def validate_folder_name(name: str) -> str:
    """Reject folder names that would leave the one-level folder layout."""
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise InvalidInput(f"Invalid folder name: {name!r}")
    return name


def _coerce_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value))
        except ValueError as e:
            raise MalformedDocument(f"Invalid created timestamp: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _coerce_tags(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    if isinstance(value, list):
        return [str(t) for t in value if t is not None and str(t).strip()]
    raise MalformedDocument(f"Invalid tags: {value!r}")


class PromptStore:
    """Filesystem-backed store of prompt files."""

    def __init__(self, root: Path | str):
        """
        Initialize prompt store.

        Args:
            root: Storage root containing the prompts directory
        """
        self.root = Path(root)

    @property
    def prompts_dir(self) -> Path:
        return get_prompts_dir(self.root)

    # Internal helpers

    def _read_file(self, path: Path) -> Prompt:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise IoFailure(f"Cannot read {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise MalformedDocument(f"{path} is not valid UTF-8") from e
        frontmatter, body = parse_frontmatter(content)
        return Prompt(frontmatter=frontmatter, content=body)

    def _write_file(self, path: Path, frontmatter: PromptFrontmatter, body: str) -> None:
        try:
            write_text_atomic(path, write_frontmatter(frontmatter, body))
        except OSError as e:
            logger.error("Failed to write prompt file %s: %s", path, e)
            raise IoFailure(f"Cannot write {path}: {e}") from e

    def _ensure_folder(self, folder: str) -> Path:
        folder_path = get_folder_path(self.root, validate_folder_name(folder))
        try:
            folder_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoFailure(f"Cannot create folder {folder_path}: {e}") from e
        return folder_path

    def _free_path(self, folder_path: Path, stem: str, current: Path | None = None) -> Path:
        """First unused file path for stem in folder: stem.md, stem-2.md, ..."""
        candidate = folder_path / f"{stem}{PROMPT_EXTENSION}"
        n = 2
        while candidate.exists() and candidate != current:
            candidate = folder_path / f"{stem}-{n}{PROMPT_EXTENSION}"
            n += 1
        return candidate

    def _metadata(self, frontmatter: PromptFrontmatter, path: Path) -> PromptMetadata:
        return PromptMetadata(
            id=frontmatter.id,
            name=frontmatter.name,
            description=frontmatter.description,
            folder=path.parent.name,
            tags=list(frontmatter.tags),
            file_path=relative_path(self.root, path),
            use_count=frontmatter.use_count,
            last_used_at=frontmatter.last_used_at,
            created_at=frontmatter.created,
        )

    # Lookup

    def read(self, prompt_id: UUID | str) -> tuple[Prompt, Path]:
        """
        Find a prompt by id, scanning every folder.

        Returns:
            (prompt, path) of the first file whose frontmatter id matches

        Raises:
            NotFound: If no readable file carries the id
        """
        target = parse_prompt_id(prompt_id)
        for path in list_prompt_files(self.root):
            try:
                prompt = self._read_file(path)
            except PromptPadError as e:
                logger.debug("Skipping unreadable prompt file %s: %s", path, e)
                continue
            if prompt.frontmatter.id == target:
                return prompt, path

        raise NotFound(f"Prompt not found: {target}")

    def get_content(self, prompt_id: UUID | str) -> str:
        """Get the body of a prompt by id."""
        prompt, _ = self.read(prompt_id)
        return prompt.content

    def scan_all(self) -> list[PromptMetadata]:
        """
        Decode every prompt file and return its metadata.

        Files that fail to decode are skipped so one bad file cannot hide
        the rest of the library.
        """
        prompts = []
        for path in list_prompt_files(self.root):
            try:
                prompt = self._read_file(path)
            except PromptPadError as e:
                logger.warning("Skipping prompt file %s: %s", path, e)
                continue
            prompts.append(self._metadata(prompt.frontmatter, path))

        logger.debug("Scanned %d prompts under %s", len(prompts), self.prompts_dir)
        return prompts

    # Mutations

    def create(
        self, data: CreatePromptInput, created: datetime | None = None
    ) -> PromptMetadata:
        """
        Create a new prompt file.

        Never overwrites: when the slug is taken in the target folder a
        numeric suffix is added (daily-standup-2.md).

        Args:
            data: Name, body, optional description, folder and tags
            created: Creation timestamp override (imports keep their own)

        Returns:
            Metadata of the stored prompt
        """
        frontmatter = PromptFrontmatter(
            id=uuid4(),
            name=data.name,
            description=data.description,
            tags=list(data.tags),
            created=created or utc_now(),
            use_count=0,
        )

        folder_path = self._ensure_folder(data.target_folder)
        path = self._free_path(folder_path, slugify(data.name))
        self._write_file(path, frontmatter, data.content)

        logger.info("Created prompt %s at %s", frontmatter.id, path)
        return self._metadata(frontmatter, path)

    def update(self, prompt_id: UUID | str, data: UpdatePromptInput) -> PromptMetadata:
        """
        Apply a partial update, moving the file when the folder changes.

        The file is moved first and rewritten second, so on success it exists
        at exactly one location. If the rewrite fails after the move, the
        previous content stays readable at the new location.

        Raises:
            NotFound: If the id does not resolve
            IoFailure: If the move or the write fails
        """
        prompt, path = self.read(prompt_id)
        frontmatter = prompt.frontmatter
        body = prompt.content

        if data.name is not None:
            frontmatter.name = data.name
        if data.description is not None:
            frontmatter.description = data.description
        if data.content is not None:
            body = data.content
        if data.tags is not None:
            frontmatter.tags = list(data.tags)

        new_path = path
        if data.folder is not None and data.folder != path.parent.name:
            folder_path = self._ensure_folder(data.folder)
            new_path = self._free_path(folder_path, path.stem)
            try:
                path.rename(new_path)
            except OSError as e:
                logger.error("Failed to move %s to %s: %s", path, new_path, e)
                raise IoFailure(f"Cannot move {path} to {new_path}: {e}") from e
            logger.info("Moved prompt %s to folder %s", frontmatter.id, data.folder)

        self._write_file(new_path, frontmatter, body)
        logger.info("Updated prompt %s", frontmatter.id)
        return self._metadata(frontmatter, new_path)

    def delete(self, prompt_id: UUID | str) -> None:
        """Delete a prompt file by id."""
        _, path = self.read(prompt_id)
        try:
            path.unlink()
        except OSError as e:
            raise IoFailure(f"Cannot delete {path}: {e}") from e
        logger.info("Deleted prompt %s (%s)", prompt_id, path)

    def record_usage(
        self, prompt_id: UUID | str, used_at: datetime | None = None
    ) -> PromptMetadata:
        """Increment the use count and stamp last_used_at."""
        prompt, path = self.read(prompt_id)
        frontmatter = prompt.frontmatter
        frontmatter.use_count += 1
        frontmatter.last_used_at = used_at or utc_now()

        self._write_file(path, frontmatter, prompt.content)
        logger.debug("Recorded usage of %s (%d)", frontmatter.id, frontmatter.use_count)
        return self._metadata(frontmatter, path)

    def import_markdown(
        self, file_name: str, content: str, folder: str = DEFAULT_FOLDER
    ) -> PromptMetadata:
        """
        Import an external Markdown file as a new prompt.

        Frontmatter is optional. The name falls back to the file name without
        its extension; a fresh id is always assigned.
        """
        fields, body = parse_loose_frontmatter(content)

        name = fields.get("name") or Path(file_name).stem
        description = fields.get("description")
        created = fields.get("created")

        data = CreatePromptInput(
            name=str(name),
            description=str(description) if description else None,
            content=body,
            folder=folder,
            tags=_coerce_tags(fields.get("tags")),
        )
        return self.create(data, created=_coerce_datetime(created) if created else None)

    # Folders

    def list_folders(self) -> list[str]:
        """List folder names, sorted."""
        return list_folders(self.root)

    def create_folder(self, name: str) -> None:
        """Create a folder (no-op if it exists)."""
        self._ensure_folder(name)
        logger.info("Created folder %s", name)
