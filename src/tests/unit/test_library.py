"""Unit tests for PromptLibrary, the operations hosts call."""

import pytest

import promptpad.storage.repos.index_repo as index_module
import promptpad.vault.notes as notes
from promptpad.core.errors import InvalidInput, IoFailure, NotFound
from promptpad.core.factory import build_library
from promptpad.core.types import BulkImportPrompt, Settings, UpdatePromptInput


class TestBuildLibrary:
    """Tests for build_library()."""

    def test_initializes_layout(self, tmp_path):
        """The storage root, prompts dir and default folder are created."""
        root = tmp_path / "fresh"

        library = build_library(root)

        assert (root / "prompts" / "uncategorized").is_dir()
        assert library.list_folders() == ["uncategorized"]

    def test_env_root(self, tmp_path, monkeypatch):
        """PROMPTPAD_STORAGE_DIR is used when no root is given."""
        monkeypatch.setenv("PROMPTPAD_STORAGE_DIR", str(tmp_path / "from-env"))

        library = build_library()

        assert library.store.root == tmp_path / "from-env"

    def test_independent_instances(self, tmp_path, make_input):
        """Libraries over different roots share no state."""
        first = build_library(tmp_path / "one")
        second = build_library(tmp_path / "two")

        first.create_prompt(make_input())

        assert len(first.get_index().prompts) == 1
        assert second.get_index().prompts == []


class TestPromptLifecycle:
    """Create, read, update, use and delete through the library."""

    def test_create_indexes(self, library, make_input):
        """A created prompt is immediately in the index."""
        metadata = library.create_prompt(make_input())

        index = library.get_index()
        assert [p.id for p in index.prompts] == [metadata.id]
        assert index.folders == ["uncategorized"]
        assert index.tags == ["work"]

    def test_read_prompt(self, library, make_input):
        """read_prompt returns frontmatter and body."""
        metadata = library.create_prompt(make_input())

        prompt = library.read_prompt(metadata.id)

        assert prompt.frontmatter.name == "Daily Standup"
        assert library.get_prompt_content(metadata.id) == prompt.content

    def test_update_moves_and_reindexes(self, library, storage_root, make_input):
        """A folder move is reflected in the file tree and the index."""
        metadata = library.create_prompt(make_input())

        library.update_prompt(metadata.id, UpdatePromptInput(folder="archive"))

        files = list((storage_root / "prompts").glob("*/*.md"))
        assert files == [storage_root / "prompts" / "archive" / "daily-standup.md"]
        entry = library.index_repo.get_entry(metadata.id)
        assert entry.folder == "archive"
        assert entry.file_path == "prompts/archive/daily-standup.md"
        assert "archive" in library.get_index().folders

    def test_record_usage_twice(self, library, make_input):
        """File and index agree on count and timestamp after two uses."""
        metadata = library.create_prompt(make_input())

        library.record_usage(metadata.id)
        second = library.record_usage(metadata.id)

        prompt = library.read_prompt(metadata.id)
        entry = library.index_repo.get_entry(metadata.id)
        assert prompt.frontmatter.use_count == 2
        assert entry.use_count == 2
        assert entry.last_used_at == prompt.frontmatter.last_used_at == second.last_used_at

    def test_delete(self, library, make_input):
        """A deleted prompt is gone from files and index."""
        metadata = library.create_prompt(make_input())

        library.delete_prompt(metadata.id)

        assert library.get_index().prompts == []
        with pytest.raises(NotFound):
            library.read_prompt(metadata.id)

    def test_unknown_id_raises(self, library):
        """Operations on unknown ids raise NotFound."""
        missing = "00000000-0000-0000-0000-000000000000"
        with pytest.raises(NotFound):
            library.update_prompt(missing, UpdatePromptInput(name="x"))
        with pytest.raises(NotFound):
            library.delete_prompt(missing)
        with pytest.raises(NotFound):
            library.record_usage(missing)

    def test_failed_file_write_leaves_index_alone(
        self, library, make_input, monkeypatch
    ):
        """Nothing is indexed when the prompt file cannot be written."""

        def _boom(path, content):
            raise OSError("disk full")

        monkeypatch.setattr(notes, "write_text_atomic", _boom)

        with pytest.raises(IoFailure):
            library.create_prompt(make_input())
        assert library.get_index().prompts == []


class TestIndexConvergence:
    """The index lags the files only until rebuild_index()."""

    def test_file_written_index_failed(self, library, make_input, monkeypatch):
        """If the index write fails, the file exists and rebuild picks it up."""

        def _boom(path, content):
            raise OSError("index locked")

        monkeypatch.setattr(index_module, "write_text_atomic", _boom)
        with pytest.raises(IoFailure):
            library.create_prompt(make_input())
        monkeypatch.undo()

        assert library.get_index().prompts == []
        assert len(library.store.scan_all()) == 1

        index = library.rebuild_index()
        assert len(index.prompts) == 1

    def test_external_edits_need_rebuild(self, library, storage_root, make_input):
        """Files added outside the library appear after a rebuild."""
        source = build_library(storage_root)
        library.get_index()
        source.store.create(make_input(name="Outside"))

        assert library.get_index().prompts == []
        assert [p.name for p in library.rebuild_index().prompts] == ["Outside"]


class TestFolders:
    """Tests for folder operations."""

    def test_create_folder_rebuilds(self, library, make_input):
        """create_folder makes the directory and refreshes the index."""
        library.store.create(make_input(name="Unindexed"))

        library.create_folder("work")

        assert library.list_folders() == ["uncategorized", "work"]
        assert [p.name for p in library.get_index().prompts] == ["Unindexed"]

    def test_create_folder_invalid(self, library):
        """Invalid folder names are rejected."""
        with pytest.raises(InvalidInput):
            library.create_folder("../outside")


class TestSettings:
    """Tests for settings passthrough."""

    def test_update_settings(self, library):
        """get_settings returns what update_settings stored."""
        library.update_settings(Settings(hotkey="Alt+Space", theme="dark"))

        settings = library.get_settings()
        assert settings.hotkey == "Alt+Space"
        assert settings.theme == "dark"


class TestSearch:
    """Tests for search through the library."""

    def test_search_content(self, library, make_input):
        """Search finds indexed prompts by body text."""
        library.create_prompt(make_input(name="Greeting", content="Hello World"))
        library.create_prompt(make_input(name="Other", content="nothing here"))

        results = library.search_content("hello")

        assert [r.name for r in results] == ["Greeting"]


class TestImportExport:
    """Tests for markdown import, bulk import and export."""

    def test_import_markdown_indexed(self, library):
        """Imported prompts are indexed."""
        metadata = library.import_markdown("Note.md", "body text", folder="imports")

        entry = library.index_repo.get_entry(metadata.id)
        assert entry.name == "Note"
        assert entry.folder == "imports"

    def test_import_bulk(self, library):
        """Valid items are created; failing items are counted with a message."""
        items = [
            BulkImportPrompt(name="One", content="1", tags=["a"]),
            BulkImportPrompt(name="Bad", content="x", folder="a/b"),
            BulkImportPrompt(name="Two", content="2", folder="work"),
        ]

        result = library.import_bulk(items)

        assert result.success == 2
        assert result.failed == 1
        assert len(result.errors) == 1
        assert result.errors[0].startswith('Failed to import "Bad"')
        assert sorted(p.name for p in library.get_index().prompts) == ["One", "Two"]

    def test_export(self, library, make_input):
        """Export carries bodies and usage for every indexed prompt."""
        metadata = library.create_prompt(make_input(folder="work"))
        library.record_usage(metadata.id)

        (exported,) = library.export_prompts()

        assert exported.name == "Daily Standup"
        assert exported.content == "Agenda: yesterday, today, blockers"
        assert exported.folder == "work"
        assert exported.tags == ["work"]
        assert exported.use_count == 1
        assert exported.created_at == metadata.created_at

    def test_export_skips_missing_files(self, library, make_input):
        """Prompts whose files vanished are left out of the export."""
        kept = library.create_prompt(make_input(name="Kept"))
        gone = library.create_prompt(make_input(name="Gone"))
        library.store.delete(gone.id)

        assert [p.name for p in library.export_prompts()] == [kept.name]

    def test_export_then_import(self, library, tmp_path, make_input):
        """Exported prompts can be bulk-imported into another library."""
        library.create_prompt(make_input(name="Seed", content="seed body", tags=["s"]))
        exported = library.export_prompts()
        other = build_library(tmp_path / "other")

        result = other.import_bulk(
            [BulkImportPrompt.model_validate(p.model_dump()) for p in exported]
        )

        assert result.success == 1
        assert other.get_prompt_content(other.get_index().prompts[0].id) == "seed body"

