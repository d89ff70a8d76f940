import logging
import pytest
from typer.testing import CliRunner
from pathlib import Path

from grindcli import main
from grindcli.infrastructure.cache.caching_service import CachingServiceImpl
from grindcli.infrastructure.cli.display import ConsoleDisplay
from grindcli.infrastructure.config.settings import set_config_for_testing, clear_test_config


class FakeClock:
    """Controllable stand-in for time.time()."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session")
def runner():
    """Provides a Typer CliRunner instance."""
    return CliRunner()

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"

@pytest.fixture
def cache_service(cache_dir: Path, clock: FakeClock) -> CachingServiceImpl:
    """A cache rooted in a temp directory with a controllable clock."""
    return CachingServiceImpl(cache_dir=cache_dir, clock=clock)

@pytest.fixture
def cli_cache_dir(cache_dir: Path):
    """Points the CLI's composition root at a temp cache directory."""
    set_config_for_testing({
        "cache.dir": str(cache_dir),
        "logging.level": "WARNING",
    })
    main.reset_dependencies()
    # create_dependencies() reconfigures the root logger; put it back afterwards
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield cache_dir
    main.reset_dependencies()
    clear_test_config()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)

@pytest.fixture
def mock_console_display(mocker):
    """Mocks the ConsoleDisplay to capture output easily.
    Patches the ConsoleDisplay where main.py instantiates it.
    """
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch('grindcli.main.ConsoleDisplay', return_value=mock)
    return mock
