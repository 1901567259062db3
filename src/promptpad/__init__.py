"""PromptPad - a personal prompt library stored as Markdown files."""

__version__ = "0.1.0"
