"""Shared pytest setup.

``label_history.main`` builds its module-level app from
``settings.data_path`` on import.  Point that at a directory that never
exists before any test module imports the package.
"""

from __future__ import annotations

import os
from pathlib import Path

TEST_DATA_PATH = Path(__file__).parent / "_no_snapshot_data"

os.environ["LABEL_HISTORY_DATA_PATH"] = str(TEST_DATA_PATH)
