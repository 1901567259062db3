"""YAML frontmatter parsing and writing for prompt files.

A prompt file is a ``---`` line, a YAML mapping, a closing ``---`` line,
a blank line and then the body verbatim.
"""

from typing import Any

import yaml
from pydantic import ValidationError

from promptpad.core.errors import MalformedDocument
from promptpad.core.types import PromptFrontmatter

FRONTMATTER_DELIMITER = "---"


def _split(content: str) -> tuple[str, str] | None:
    """Split content into (yaml_text, body), or None without an opening line.

    Raises MalformedDocument when the opening delimiter has no closing match.
    """
    lines = content.lstrip("\ufeff").strip().split("\n")
    if lines[0].rstrip() != FRONTMATTER_DELIMITER:
        return None

    for i in range(1, len(lines)):
        if lines[i].rstrip() == FRONTMATTER_DELIMITER:
            yaml_text = "\n".join(lines[1:i])
            body = "\n".join(lines[i + 1 :]).strip()
            return yaml_text, body

    raise MalformedDocument("Missing closing frontmatter delimiter")


def _load_mapping(yaml_text: str) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(yaml_text)
    except yaml.YAMLError as e:
        raise MalformedDocument(f"Invalid YAML in frontmatter: {e}") from e

    if not isinstance(raw, dict):
        raise MalformedDocument(
            f"Frontmatter must be a mapping, got {type(raw).__name__}"
        )
    return raw


def parse_frontmatter(content: str) -> tuple[PromptFrontmatter, str]:
    """
    Parse YAML frontmatter from prompt content.

    Args:
        content: Full file content including frontmatter

    Returns:
        (frontmatter, body) - validated frontmatter and the trimmed body

    Raises:
        MalformedDocument: If a delimiter is missing or the metadata is invalid
    """
    parts = _split(content)
    if parts is None:
        raise MalformedDocument("Missing frontmatter delimiter")

    yaml_text, body = parts
    raw = _load_mapping(yaml_text)

    try:
        frontmatter = PromptFrontmatter.model_validate(raw)
    except ValidationError as e:
        raise MalformedDocument(f"Invalid frontmatter fields: {e}") from e

    return frontmatter, body


def write_frontmatter(frontmatter: PromptFrontmatter, body: str) -> str:
    """
    Serialize frontmatter and body into prompt file content.

    Args:
        frontmatter: Frontmatter object to serialize
        body: Prompt body, written verbatim

    Returns:
        File content with --- delimiters
    """
    data = frontmatter.model_dump(mode="json", exclude_none=True)
    yaml_text = yaml.safe_dump(
        data,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    return f"{FRONTMATTER_DELIMITER}\n{yaml_text}{FRONTMATTER_DELIMITER}\n\n{body}"


def parse_loose_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """
    Parse optional frontmatter from an external Markdown file.

    Unlike parse_frontmatter, no fields are required and a file without
    frontmatter is all body.

    Returns:
        (fields, body) - raw frontmatter mapping (possibly empty) and body
    """
    parts = _split(content)
    if parts is None:
        return {}, content.strip()

    yaml_text, body = parts
    if not yaml_text.strip():
        return {}, body
    return _load_mapping(yaml_text), body
