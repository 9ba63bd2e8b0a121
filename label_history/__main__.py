"""Module entry point for ``python -m label_history``."""

from __future__ import annotations

from label_history.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
