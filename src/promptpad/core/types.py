"""Shared types and data structures for PromptPad."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from promptpad.core.config import DEFAULT_FOLDER, INDEX_VERSION


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _default_hotkey() -> str:
    if sys.platform == "darwin":
        return "Cmd+Shift+Space"
    return "Ctrl+Shift+Space"


class PromptFrontmatter(BaseModel):
    """Metadata stored in the YAML header of a prompt file."""

    id: UUID
    name: str
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    created: datetime
    use_count: int = Field(default=0, ge=0)
    last_used_at: datetime | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value):
        return [] if value is None else value


class Prompt(BaseModel):
    """Full prompt: frontmatter plus body (loaded on demand)."""

    frontmatter: PromptFrontmatter
    content: str


class PromptMetadata(BaseModel):
    """Index entry for a prompt. Carries no body text."""

    id: UUID
    name: str
    description: str | None = None
    folder: str | None = None
    tags: list[str] = Field(default_factory=list)
    file_path: str
    use_count: int = 0
    last_used_at: datetime | None = None
    created_at: datetime


class PromptIndex(BaseModel):
    """The derived index snapshot persisted as index.json."""

    version: int = INDEX_VERSION
    updated_at: datetime = Field(default_factory=utc_now)
    prompts: list[PromptMetadata] = Field(default_factory=list)
    folders: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class Settings(BaseModel):
    """Application settings. Absent fields take their defaults."""

    model_config = ConfigDict(extra="ignore")

    hotkey: str = Field(default_factory=_default_hotkey)
    theme: str = "system"
    storage_location: str | None = None
    launch_at_startup: bool = False
    preserve_clipboard: bool = False


class CreatePromptInput(BaseModel):
    """Input for creating a new prompt."""

    name: str
    description: str | None = None
    content: str = ""
    folder: str | None = None
    tags: list[str] = Field(default_factory=list)

    @property
    def target_folder(self) -> str:
        return self.folder or DEFAULT_FOLDER


class UpdatePromptInput(BaseModel):
    """Partial update for an existing prompt. Only set fields are applied."""

    name: str | None = None
    description: str | None = None
    content: str | None = None
    folder: str | None = None
    tags: list[str] | None = None


class BulkImportPrompt(BaseModel):
    """One record of a bulk JSON import."""

    name: str
    description: str | None = None
    content: str
    folder: str | None = None
    tags: list[str] = Field(default_factory=list)


class ImportResult(BaseModel):
    """Outcome of a bulk import."""

    success: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)


class ExportedPrompt(BaseModel):
    """A prompt flattened for JSON export."""

    name: str
    description: str | None = None
    content: str
    folder: str | None = None
    tags: list[str] = Field(default_factory=list)
    use_count: int = 0
    created_at: datetime
    last_used_at: datetime | None = None


class PromptRepository(Protocol):
    """Lookup and persistence of authoritative prompt files.

    The filesystem implementation finds prompts by a linear scan; another
    implementation can back the same calls with a real on-disk index.
    """

    def create(self, data: CreatePromptInput) -> PromptMetadata: ...

    def read(self, prompt_id: UUID | str) -> tuple[Prompt, Path]: ...

    def get_content(self, prompt_id: UUID | str) -> str: ...

    def update(self, prompt_id: UUID | str, data: UpdatePromptInput) -> PromptMetadata: ...

    def delete(self, prompt_id: UUID | str) -> None: ...

    def record_usage(self, prompt_id: UUID | str) -> PromptMetadata: ...

    def scan_all(self) -> list[PromptMetadata]: ...

    def list_folders(self) -> list[str]: ...

    def create_folder(self, name: str) -> None: ...


__all__ = [
    "BulkImportPrompt",
    "CreatePromptInput",
    "ExportedPrompt",
    "ImportResult",
    "Prompt",
    "PromptFrontmatter",
    "PromptIndex",
    "PromptMetadata",
    "PromptRepository",
    "Settings",
    "UpdatePromptInput",
    "utc_now",
]
