import os
import sys

import pytest

# Ensure project root and libs are importable in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
LIBS = os.path.join(ROOT, "libs")
for p in (ROOT, LIBS):
    if p not in sys.path:
        sys.path.insert(0, p)

from fxtheory.tuning import Fretting  # noqa: E402


@pytest.fixture
def open_strings():
    """All six strings open: F A C G C E."""
    return Fretting.of([0, 0, 0, 0, 0, 0])


@pytest.fixture
def fmaj7_shape():
    """G string at fret 2 (sounds A)."""
    return Fretting.of([0, 0, 0, 2, 0, 0])


@pytest.fixture
def all_muted():
    return Fretting.muted()
