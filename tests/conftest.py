"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of cloverlens modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("cloverlens"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo configure_logging() calls made by a test."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
