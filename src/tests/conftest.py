"""Shared test fixtures and configuration."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import pytest

from promptpad.core.factory import build_library
from promptpad.core.types import CreatePromptInput, PromptFrontmatter
from promptpad.storage.repos.index_repo import IndexRepo
from promptpad.storage.repos.settings_repo import SettingsRepo
from promptpad.vault.layout import ensure_storage_structure
from promptpad.vault.notes import PromptStore


@pytest.fixture
def storage_root(tmp_path):
    """Provide an initialized storage root."""
    root = tmp_path / "PromptPad"
    ensure_storage_structure(root)
    return root


@pytest.fixture
def store(storage_root):
    """PromptStore over the temp storage root."""
    return PromptStore(storage_root)


@pytest.fixture
def index_repo(storage_root, store):
    """IndexRepo over the temp storage root."""
    return IndexRepo(storage_root, store)


@pytest.fixture
def settings_repo(storage_root):
    """SettingsRepo over the temp storage root."""
    return SettingsRepo(storage_root)


@pytest.fixture
def library(storage_root):
    """Fully wired PromptLibrary."""
    return build_library(storage_root)


@pytest.fixture
def sample_frontmatter():
    """Frontmatter with every field populated."""
    return PromptFrontmatter(
        id=UUID("6f1c2d3e-4b5a-4c6d-8e7f-9a0b1c2d3e4f"),
        name="Daily Standup",
        description="Morning sync template",
        tags=["work", "meetings"],
        created=datetime(2024, 1, 28, 9, 30, 0, 123456, tzinfo=timezone.utc),
        use_count=3,
        last_used_at=datetime(2024, 2, 1, 8, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def make_input():
    """Factory for CreatePromptInput objects."""

    def _make_input(
        name: str = "Daily Standup",
        content: str = "Agenda: yesterday, today, blockers",
        *,
        description: str | None = None,
        folder: str | None = None,
        tags: list[str] | None = None,
    ) -> CreatePromptInput:
        return CreatePromptInput(
            name=name,
            description=description,
            content=content,
            folder=folder,
            tags=tags if tags is not None else ["work"],
        )

    return _make_input
