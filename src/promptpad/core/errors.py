"""Error kinds raised by the PromptPad store, index and settings layers."""


class PromptPadError(Exception):
    """Base class for all PromptPad errors."""

    kind = "error"


class MalformedDocument(PromptPadError):
    """An on-disk file violates its format contract."""

    kind = "malformed_document"


class NotFound(PromptPadError):
    """An identifier does not resolve to any stored prompt."""

    kind = "not_found"


class IoFailure(PromptPadError):
    """A filesystem read, write, rename or create failed."""

    kind = "io_failure"


class InvalidInput(PromptPadError):
    """Caller-supplied input could not be used (e.g. a bad search pattern)."""

    kind = "invalid_input"
