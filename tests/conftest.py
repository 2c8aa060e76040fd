"""Pytest fixtures for claude-wrapped tests."""

import pytest
from pathlib import Path
import tempfile
import shutil
import time
from datetime import date


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return Path(__file__).parent / 'fixtures'


@pytest.fixture
def sample_claude_path(fixtures_dir) -> Path:
    """Path to the sample Claude config directory."""
    return fixtures_dir / 'claude'


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir)


@pytest.fixture
def temp_claude_dir(temp_dir, sample_claude_path):
    """Create a temporary copy of the sample Claude config directory."""
    claude_dir = temp_dir / 'claude'
    shutil.copytree(sample_claude_path, claude_dir)
    return claude_dir


@pytest.fixture
def empty_claude_dir(temp_dir):
    """Create an empty Claude config directory."""
    claude_dir = temp_dir / 'empty-claude'
    claude_dir.mkdir()
    return claude_dir


@pytest.fixture
def fixed_today() -> date:
    """Fallback date used when there is no activity."""
    return date(2024, 2, 1)


@pytest.fixture
def write_jsonl():
    """Write raw lines to a JSONL file, creating parent directories."""
    def _write(path: Path, lines: list[str]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text('\n'.join(lines) + '\n')
        return path
    return _write


@pytest.fixture
def local_utc_minus_5(monkeypatch):
    """Switch the process local time to a fixed UTC-5 zone."""
    if not hasattr(time, 'tzset'):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv('TZ', 'XXX+5')
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
