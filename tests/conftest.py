from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Callable, List

import pytest

from eretria.utils import DEBUG_PY_TRACE_ENV


@pytest.fixture(autouse=True)
def _plain_diagnostics(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test without the traceback switch inherited from the shell."""
    monkeypatch.delenv(DEBUG_PY_TRACE_ENV, raising=False)


@pytest.fixture
def source_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing Eretria source to a UTF-8 file under tmp_path."""

    def write(source: str, name: str = "prog.ert") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return write


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Table-driven cases share ids by name; refuse to run if two collide."""
    del session
    del config

    counts = Counter(item.nodeid for item in items)
    duplicates = sorted(nodeid for nodeid, count in counts.items() if count > 1)
    if duplicates:
        lines = "\n".join(f"- {nodeid}" for nodeid in duplicates)
        raise pytest.UsageError(f"Duplicate test ids among table cases:\n{lines}")
