"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py) and delegates the
work to the cache service, reporting the outcome through the user
interface. Mirrors the host application's "Cache Management" menu:
status, clear all, clear one namespace, invalidate one entry, cleanup.
"""

import logging
from typing import Optional

# Domain Layer Imports
from grindcli.domain.interfaces.cache import CacheService
from grindcli.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)

class CommandHandler:
    """Handles incoming cache commands and delegates to the cache service."""

    def __init__(self, cache_service: CacheService, ui: UserInterface):
        """Initializes the CommandHandler with the shared cache and the UI."""
        self.cache_service = cache_service
        self.ui = ui

    def handle_status(self, namespace: Optional[str] = None) -> None:
        """Handles the 'cache status' command."""
        logger.info(f"Handling 'cache status' command (namespace={namespace or 'all'})")
        try:
            report = self.cache_service.get_cache_status(namespace)
            self.ui.display_cache_status(report)
        except Exception as e:
            logger.error(f"Failed to build cache status report: {e}", exc_info=True)
            self.ui.display_error(f"Failed to read cache status: {e}")

    async def handle_clear(self, namespace: Optional[str] = None, assume_yes: bool = False) -> None:
        """Handles the 'cache clear' command for one namespace or all of them.

        Clearing every namespace asks for confirmation unless `assume_yes` is set.
        """
        logger.info(f"Handling 'cache clear' command (namespace={namespace or 'all'})")
        if not namespace and not assume_yes:
            if not self.ui.ask_yes_no_question("Clear all cached questions?"):
                self.ui.display_info("Cache clear cancelled.")
                return
        try:
            if namespace:
                await self.cache_service.invalidate(namespace)
                self.ui.display_success(f"{namespace} cache cleared successfully")
            else:
                await self.cache_service.clear()
                self.ui.display_success("All caches cleared successfully")
        except Exception as e:
            logger.error(f"Failed to clear cache: {e}", exc_info=True)
            self.ui.display_error(f"Failed to clear cache: {e}")

    async def handle_invalidate(self, namespace: str, identifier: str) -> None:
        """Handles the 'cache invalidate' command for a single entry."""
        logger.info(f"Handling 'cache invalidate' command: {namespace}/{identifier}")
        try:
            await self.cache_service.invalidate(namespace, identifier)
            self.ui.display_success(f"Removed '{identifier}' from the {namespace} cache")
        except Exception as e:
            logger.error(f"Failed to invalidate cache entry: {e}", exc_info=True)
            self.ui.display_error(f"Failed to invalidate cache entry: {e}")

    async def handle_cleanup(self) -> None:
        """Handles the 'cache cleanup' command (sweeps expired entries)."""
        logger.info("Handling 'cache cleanup' command")
        try:
            removed = await self.cache_service.cleanup()
        except Exception as e:
            logger.error(f"Cache cleanup failed: {e}", exc_info=True)
            self.ui.display_error(f"Cache cleanup failed: {e}")
            return
        if removed:
            self.ui.display_success(f"Cache cleanup completed: {removed} expired entries removed")
        else:
            self.ui.display_info("Cache cleanup completed: no expired entries found")
