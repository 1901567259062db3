"""Vault module for the authoritative prompt files (Markdown + frontmatter).

The vault is PromptPad's source of truth: every prompt is a human-readable
Markdown file that can be edited outside the app. The index is derived from
these files and can always be rebuilt from them.
"""

from promptpad.vault.layout import (
    ensure_storage_structure,
    get_index_path,
    get_prompts_dir,
    get_settings_path,
    list_folders,
)

__all__ = [
    "ensure_storage_structure",
    "get_index_path",
    "get_prompts_dir",
    "get_settings_path",
    "list_folders",
]
