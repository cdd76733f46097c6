from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "tests"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from fakes import FakeMapper  # noqa: E402


@pytest.fixture()
def mapper() -> FakeMapper:
    return FakeMapper()


@pytest.fixture()
def no_config(tmp_path: Path, monkeypatch) -> Path:
    missing = tmp_path / "missing.json"
    monkeypatch.setenv("MAPPER_CONFIG", str(missing))
    return missing
