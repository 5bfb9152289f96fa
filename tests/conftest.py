"""Shared test fixtures and factories."""

from collections.abc import AsyncGenerator, Iterator
from pathlib import Path

import pytest

from fgwork.config.paths import ENV_VAR, get_fgwork_home
from fgwork.scheduling import Job, WorkManager
from fgwork.store import MemoryStore

# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def fgwork_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point FGWORK_HOME at a temp dir so tests never touch ~/.fgwork."""
    home = tmp_path / "fgwork-home"
    monkeypatch.setenv(ENV_VAR, str(home))
    get_fgwork_home.cache_clear()
    yield home
    get_fgwork_home.cache_clear()


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def config_toml_content(tmp_path: Path) -> str:
    """Valid TOML config content."""
    return f"""
[store]
backend = "file"
path = "{tmp_path / "store.json"}"

[scheduler]
discard_ignored_due_jobs = false

[logging]
level = "debug"
"""


@pytest.fixture
def config_file(tmp_path: Path, config_toml_content: str) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(config_toml_content)
    return config_path


# =============================================================================
# Scheduler Fixtures
# =============================================================================


class ProcessRecorder:
    """Process callback that records the ids of the jobs it was given."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.jobs: list[Job] = []

    async def __call__(self, job: Job) -> None:
        self.calls.append(job.id)
        self.jobs.append(job)


@pytest.fixture
def recorder() -> ProcessRecorder:
    return ProcessRecorder()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
async def manager(memory_store: MemoryStore) -> AsyncGenerator[WorkManager, None]:
    """An initialized manager over an in-memory store."""
    work_manager = WorkManager(memory_store)
    await work_manager.init()
    yield work_manager
    await work_manager.close()


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1", "COLUMNS": "200"})
