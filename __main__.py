"""CLI entry point for specmint.

This module acts as the central entry point for the project's CLI tools.
It loads `.env` and delegates commands to `specmint.cli`.

Usage:
    python . serve --transport http
    python . enhance spec.md --screenshot screen.png
    python . status
"""

import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from specmint.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
