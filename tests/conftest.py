"""Pytest configuration.

The repository uses a flat package layout. This conftest ensures tests can import from the
`solana_plugin.*` namespace (and the local `fakes` helpers) when running `pytest` without
installing the package.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure `import solana_plugin...` and `import fakes` work without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))
sys.path.insert(0, str(REPO_ROOT / "tests"))
