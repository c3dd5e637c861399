import json
import os
from pathlib import Path
from typing import Any

import pytest

from infix.infix_precedence import PrecedenceTable

# Monkeypatch coverage to bypass teardown crash in act/docker
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    # Nukes the teardown assertion that fails in act
    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


@pytest.fixture  # type: ignore[misc]
def arithmetic() -> PrecedenceTable:
    return PrecedenceTable.arithmetic()


@pytest.fixture  # type: ignore[misc]
def table_file(tmp_path: Path) -> Path:
    """A precedence file adding `%` and the word operator `mod`."""
    path = tmp_path / "table.json"
    path.write_text(json.dumps({"+,-": 1, "*,/,%,mod": 2, "^": 3}))
    return path
