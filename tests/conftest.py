from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


import pytest

from tests.helpers import full_topic, source, write_corpus


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """A small healthy corpus: two complete topics linked to each other."""
    root = tmp_path / "content"
    sources = [
        *full_topic("02-design", "database-design", related_topics=["incident-response"]),
        *full_topic("06-operations", "incident-response", updated="2025-10-01"),
    ]
    # mid-depth reads after surface
    sources[1] = source(
        "02-design",
        "database-design",
        "mid-depth",
        prerequisites=["database-design-surface"],
    )
    return write_corpus(root, sources)
