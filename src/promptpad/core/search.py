"""Full-text search over prompt bodies."""

import logging
import re

from promptpad.core.errors import InvalidInput, PromptPadError
from promptpad.core.types import PromptMetadata, PromptRepository
from promptpad.storage.repos.index_repo import IndexRepo

logger = logging.getLogger(__name__)


def search_content(
    index_repo: IndexRepo, store: PromptRepository, query: str
) -> list[PromptMetadata]:
    """
    Find indexed prompts whose body contains query, ignoring case.

    The query is matched literally. Bodies are read on demand; prompts that
    can no longer be read are skipped. An empty query matches every prompt.
    """
    try:
        pattern = re.compile(re.escape(query), re.IGNORECASE)
    except re.error as e:
        raise InvalidInput(f"Invalid search query: {query!r}") from e

    results = []
    for metadata in index_repo.get().prompts:
        try:
            content = store.get_content(metadata.id)
        except PromptPadError as e:
            logger.debug("Search skipping %s: %s", metadata.id, e)
            continue
        if pattern.search(content):
            results.append(metadata)

    logger.debug("Search %r matched %d prompts", query, len(results))
    return results
