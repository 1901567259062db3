"""PromptPad core library - store, index, settings and search."""

from typing import TYPE_CHECKING

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
    PromptIndex,
    PromptMetadata,
    Settings,
    UpdatePromptInput,
)

if TYPE_CHECKING:
    from promptpad.core.factory import build_library
    from promptpad.core.library import PromptLibrary

__all__ = [
    # Core classes
    "PromptLibrary",
    "build_library",
    # Types
    "CreatePromptInput",
    "Prompt",
    "PromptIndex",
    "PromptMetadata",
    "Settings",
    "UpdatePromptInput",
    # Errors
    "InvalidInput",
    "IoFailure",
    "MalformedDocument",
    "NotFound",
    "PromptPadError",
]


def __getattr__(name: str):
    if name == "PromptLibrary":
        from promptpad.core.library import PromptLibrary

        return PromptLibrary
    if name == "build_library":
        from promptpad.core.factory import build_library

        return build_library
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
