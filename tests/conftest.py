from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for path in (ROOT, ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))


import pytest

from kitgen.rendering.scope import RenderScope


@pytest.fixture
def scope() -> RenderScope:
    return RenderScope()
