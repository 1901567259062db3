"""PromptLibrary - the operations exposed to host interfaces.

Every mutation writes the authoritative prompt file first and updates the
index second. The two steps are not a transaction: if the process dies in
between, the index lags the files until rebuild_index() is called.
"""

import logging
from uuid import UUID

from promptpad.core.config import DEFAULT_FOLDER
from promptpad.core.errors import PromptPadError
from promptpad.core.search import search_content
from promptpad.core.types import (
    BulkImportPrompt,
    CreatePromptInput,
    ExportedPrompt,
    ImportResult,
    Prompt,
    PromptIndex,
    PromptMetadata,
    Settings,
    UpdatePromptInput,
)
from promptpad.storage.repos.index_repo import IndexRepo
from promptpad.storage.repos.settings_repo import SettingsRepo
from promptpad.vault.notes import PromptStore

logger = logging.getLogger(__name__)


class PromptLibrary:
    """Store, index and settings wired together for a host to call."""

    def __init__(
        self,
        store: PromptStore,
        index_repo: IndexRepo,
        settings_repo: SettingsRepo,
    ):
        """
        Initialize the library.

        Args:
            store: Authoritative prompt file store
            index_repo: Derived index cache over the same storage root
            settings_repo: Settings record repository
        """
        self.store = store
        self.index_repo = index_repo
        self.settings_repo = settings_repo

    # Prompts

    def create_prompt(self, data: CreatePromptInput) -> PromptMetadata:
        metadata = self.store.create(data)
        self.index_repo.upsert(metadata)
        return metadata

    def read_prompt(self, prompt_id: UUID | str) -> Prompt:
        prompt, _ = self.store.read(prompt_id)
        return prompt

    def get_prompt_content(self, prompt_id: UUID | str) -> str:
        return self.store.get_content(prompt_id)

    def update_prompt(
        self, prompt_id: UUID | str, data: UpdatePromptInput
    ) -> PromptMetadata:
        metadata = self.store.update(prompt_id, data)
        self.index_repo.upsert(metadata)
        return metadata

    def delete_prompt(self, prompt_id: UUID | str) -> None:
        self.store.delete(prompt_id)
        self.index_repo.remove(prompt_id)

    def record_usage(self, prompt_id: UUID | str) -> PromptMetadata:
        """Bump the use count in the file, then mirror it into the index."""
        metadata = self.store.record_usage(prompt_id)
        self.index_repo.bump_usage(metadata.id, used_at=metadata.last_used_at)
        return metadata

    # Folders

    def list_folders(self) -> list[str]:
        return self.store.list_folders()

    def create_folder(self, name: str) -> None:
        """Create a folder, then rebuild the index from the files."""
        self.store.create_folder(name)
        self.index_repo.rebuild()

    # Index

    def get_index(self) -> PromptIndex:
        return self.index_repo.get()

    def rebuild_index(self) -> PromptIndex:
        return self.index_repo.rebuild()

    # Settings

    def get_settings(self) -> Settings:
        return self.settings_repo.get()

    def update_settings(self, settings: Settings) -> Settings:
        return self.settings_repo.update(settings)

    # Search

    def search_content(self, query: str) -> list[PromptMetadata]:
        return search_content(self.index_repo, self.store, query)

    # Import / export

    def import_markdown(
        self, file_name: str, content: str, folder: str = DEFAULT_FOLDER
    ) -> PromptMetadata:
        metadata = self.store.import_markdown(file_name, content, folder=folder)
        self.index_repo.upsert(metadata)
        return metadata

    def import_bulk(self, items: list[BulkImportPrompt]) -> ImportResult:
        """Import many prompts; a failing item is counted, not fatal."""
        result = ImportResult()
        for item in items:
            try:
                self.create_prompt(
                    CreatePromptInput(
                        name=item.name,
                        description=item.description,
                        content=item.content,
                        folder=item.folder,
                        tags=item.tags,
                    )
                )
            except PromptPadError as e:
                logger.warning("Bulk import of %r failed: %s", item.name, e)
                result.failed += 1
                result.errors.append(f'Failed to import "{item.name}": {e}')
            else:
                result.success += 1

        logger.info(f"Bulk import: success={result.success}, failed={result.failed}")
        return result

    def export_prompts(self) -> list[ExportedPrompt]:
        """Export every indexed prompt with its body."""
        exported = []
        for metadata in self.index_repo.get().prompts:
            try:
                content = self.store.get_content(metadata.id)
            except PromptPadError as e:
                logger.warning("Failed to export %r: %s", metadata.name, e)
                continue
            exported.append(
                ExportedPrompt(
                    name=metadata.name,
                    description=metadata.description,
                    content=content,
                    folder=metadata.folder,
                    tags=metadata.tags,
                    use_count=metadata.use_count,
                    created_at=metadata.created_at,
                    last_used_at=metadata.last_used_at,
                )
            )
        return exported
