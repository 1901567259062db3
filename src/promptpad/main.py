"""Unified entry point for PromptPad.

Starts a host interface over the prompt library:
- CLI (default)
"""

import argparse
import sys

from promptpad.core.config import resolve_storage_root
from promptpad.core.errors import IoFailure
from promptpad.vault.layout import ensure_storage_structure


def main():
    """Main entry point with interface selection."""
    parser = argparse.ArgumentParser(
        description="PromptPad - your personal prompt library",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Interfaces:
  cli         Run a CLI command (default)

Examples:
  python -m promptpad list              # List prompts
  python -m promptpad cli search "sql"  # Search prompt bodies
  python -m promptpad --check           # Verify the storage root
""",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Create/verify the storage root and exit",
    )

    args, rest = parser.parse_known_args()

    if args.check:
        root = resolve_storage_root()
        try:
            ensure_storage_structure(root)
        except IoFailure as e:
            # Without a storage root the process cannot start
            print(f"Fatal: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Storage ready at {root}")
        return

    if rest and rest[0] == "cli":
        rest = rest[1:]

    from promptpad.interfaces.cli.app import app

    app(args=rest, prog_name="promptpad")


if __name__ == "__main__":
    main()
