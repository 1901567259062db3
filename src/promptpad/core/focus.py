"""Focus restore and paste capability.

Host shells capture the window that was active before the launcher opened
and later hand focus back and inject a paste. Platform implementations live
in the host; the core only defines the contract.
"""

from typing import Protocol


class FocusController(Protocol):
    """Callback contract for host focus automation."""

    def capture_active_target(self) -> object | None:
        """Remember the active window/app. Returns an opaque handle or None."""
        ...

    def restore_and_inject(self, handle: object | None) -> bool:
        """Refocus the captured target and simulate a paste. True on success."""
        ...


class NullFocusController:
    """Controller for hosts with no focus automation."""

    def capture_active_target(self) -> object | None:
        return None

    def restore_and_inject(self, handle: object | None) -> bool:
        return False
