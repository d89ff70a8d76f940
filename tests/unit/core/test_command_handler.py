import pytest
from unittest.mock import AsyncMock, MagicMock

from grindcli.core.command_handler import CommandHandler
from grindcli.domain.interfaces.cache import CacheService
from grindcli.domain.interfaces.user_interface import UserInterface
from grindcli.domain.models.cache import CacheStatusReport, MemoryCacheStatus

@pytest.fixture
def mock_cache():
    mock = MagicMock(spec=CacheService)
    mock.invalidate = AsyncMock()
    mock.clear = AsyncMock()
    mock.cleanup = AsyncMock(return_value=0)
    return mock

@pytest.fixture
def mock_ui():
    return MagicMock(spec=UserInterface)

@pytest.fixture
def handler(mock_cache, mock_ui):
    """Fixture to create CommandHandler with mocked dependencies."""
    return CommandHandler(cache_service=mock_cache, ui=mock_ui)

def test_handle_status_displays_report(handler: CommandHandler, mock_cache: MagicMock, mock_ui: MagicMock):
    report = CacheStatusReport(memory_cache=MemoryCacheStatus(entries=1, size=10, max_size=100))
    mock_cache.get_cache_status.return_value = report

    handler.handle_status("grind75")

    mock_cache.get_cache_status.assert_called_once_with("grind75")
    mock_ui.display_cache_status.assert_called_once_with(report)

def test_handle_status_reports_errors(handler: CommandHandler, mock_cache: MagicMock, mock_ui: MagicMock):
    mock_cache.get_cache_status.side_effect = RuntimeError("broken")

    handler.handle_status()

    mock_ui.display_error.assert_called_once_with("Failed to read cache status: broken")

async def test_handle_clear_namespace(handler: CommandHandler, mock_cache: MagicMock, mock_ui: MagicMock):
    await handler.handle_clear("leetcode")

    mock_cache.invalidate.assert_awaited_once_with("leetcode")
    mock_cache.clear.assert_not_awaited()
    mock_ui.display_success.assert_called_once_with("leetcode cache cleared successfully")

async def test_handle_clear_all_after_confirmation(handler: CommandHandler, mock_cache: MagicMock, mock_ui: MagicMock):
    mock_ui.ask_yes_no_question.return_value = True

    await handler.handle_clear()

    mock_ui.ask_yes_no_question.assert_called_once()
    mock_cache.clear.assert_awaited_once_with()
    mock_ui.display_success.assert_called_once_with("All caches cleared successfully")

async def test_handle_clear_all_declined(handler: CommandHandler, mock_cache: MagicMock, mock_ui: MagicMock):
    mock_ui.ask_yes_no_question.return_value = False

    await handler.handle_clear()

    mock_cache.clear.assert_not_awaited()
    mock_ui.display_info.assert_called_once_with("Cache clear cancelled.")

async def test_handle_clear_all_assume_yes(handler: CommandHandler, mock_cache: MagicMock, mock_ui: MagicMock):
    await handler.handle_clear(assume_yes=True)

    mock_ui.ask_yes_no_question.assert_not_called()
    mock_cache.clear.assert_awaited_once_with()

async def test_handle_invalidate(handler: CommandHandler, mock_cache: MagicMock, mock_ui: MagicMock):
    await handler.handle_invalidate("companies", "google")

    mock_cache.invalidate.assert_awaited_once_with("companies", "google")
    mock_ui.display_success.assert_called_once()

async def test_handle_cleanup_reports_count(handler: CommandHandler, mock_cache: MagicMock, mock_ui: MagicMock):
    mock_cache.cleanup.return_value = 3

    await handler.handle_cleanup()

    mock_ui.display_success.assert_called_once_with("Cache cleanup completed: 3 expired entries removed")

async def test_handle_cleanup_nothing_to_do(handler: CommandHandler, mock_ui: MagicMock):
    await handler.handle_cleanup()

    mock_ui.display_info.assert_called_once_with("Cache cleanup completed: no expired entries found")
    mock_ui.display_success.assert_not_called()

async def test_handle_cleanup_failure_is_displayed(handler: CommandHandler, mock_cache: MagicMock, mock_ui: MagicMock):
    mock_cache.cleanup.side_effect = OSError("read-only file system")

    await handler.handle_cleanup()

    mock_ui.display_error.assert_called_once_with("Cache cleanup failed: read-only file system")
