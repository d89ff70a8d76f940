"""Main entry point for the grindcli application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import typer
import logging
import asyncio
import sys

from typing import Optional, Dict, Any, Coroutine
from typing_extensions import Annotated

# --- Setup Logging Early ---
# Use basic config until setup_logging is called with the loaded settings
logging.basicConfig(level=logging.WARNING, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

# --- Core Layer ---
from grindcli.core.command_handler import CommandHandler

# --- Infrastructure Layer ---
# Config
from grindcli.infrastructure.config.settings import (
    load_configuration,
    get_config,
    get_cache_dir,
    get_cache_max_memory_bytes,
    get_cache_default_ttl,
    get_cache_namespaces,
)
# UI
from grindcli.infrastructure.cli.display import ConsoleDisplay
# Cache
from grindcli.infrastructure.cache.caching_service import CachingServiceImpl
from grindcli.infrastructure.cache.file_tier import is_valid_namespace
# Monitoring
from grindcli.infrastructure.monitoring.logger_setup import setup_logging

# --- Dependency Injection Container (Manual) ---

def create_dependencies() -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root. The cache service created here is the
    single shared instance handed to every collaborator that needs caching.
    """
    dependencies: Dict[str, Any] = {}
    try:
        # 1. Load Configuration First
        load_configuration()
        log_level_name = str(get_config('logging.level', 'INFO')).upper()
        log_level = getattr(logging, log_level_name, logging.INFO)
        setup_logging(
            log_level=log_level,
            log_file=get_config('logging.file'),
            log_format=get_config('logging.format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            max_bytes=int(get_config('logging.max_bytes', 10 * 1024 * 1024)),
            backup_count=int(get_config('logging.backup_count', 5)),
        )
        logger.info("Configuration and logging initialized.")

        # 2. Instantiate Infrastructure Adapters & Services
        dependencies['ui'] = ConsoleDisplay()
        dependencies['cache_service'] = CachingServiceImpl(
            cache_dir=get_cache_dir(),
            max_memory_size=get_cache_max_memory_bytes(),
            default_ttl=get_cache_default_ttl(),
            namespaces=get_cache_namespaces(),
        )

        # 3. Instantiate Command Handler
        dependencies['command_handler'] = CommandHandler(
            cache_service=dependencies['cache_service'],
            ui=dependencies['ui'],
        )
        logger.info("All dependencies initialized successfully.")
        return dependencies

    except Exception as e:
        logger.error(f"Fatal Error during application initialization: {e}", exc_info=True)
        if 'ui' in dependencies:
            dependencies['ui'].display_error(f"Application Initialization Failed: {e}")
        else:
            print(f"FATAL ERROR during initialization: {e}", file=sys.stderr)
        sys.exit(1)

# Single instances of our services, built on first command
_dependencies: Dict[str, Any] = {}

def get_dependencies() -> Dict[str, Any]:
    if not _dependencies:
        _dependencies.update(create_dependencies())
    return _dependencies

def reset_dependencies() -> None:
    """Drops the wired-up services so the next command rebuilds them."""
    _dependencies.clear()

# --- Typer App Definition ---
app = typer.Typer(
    name="grindcli",
    help="grindcli: fetch coding-practice questions and manage their local cache.",
    add_completion=False,
)
cache_app = typer.Typer(help="Inspect and manage the local question cache.", no_args_is_help=True)
app.add_typer(cache_app, name="cache")

# --- Helper for Running Async Commands ---
def run_async(coro: Coroutine[Any, Any, None]) -> None:
    """Runs an async handler from a sync Typer command."""
    try:
        asyncio.run(coro)
    except Exception as e:
        logger.error(f"Error executing async command: {e}", exc_info=True)
        get_dependencies()['ui'].display_error(f"Command execution failed: {e}")
        raise typer.Exit(code=1)

# --- Argument Validation ---
def validate_namespace(value: Optional[str]) -> Optional[str]:
    """Typer callback rejecting namespaces that are not plain directory names."""
    if value is not None and not is_valid_namespace(value):
        raise typer.BadParameter(f"'{value}' is not a valid cache namespace name.")
    return value

# --- CLI Commands ---

@cache_app.command(name="status")
def status_command(
    namespace: Annotated[
        Optional[str],
        typer.Option("--namespace", "-n", help="Only report this namespace.", callback=validate_namespace)
    ] = None,
):
    """Show memory and file cache usage."""
    handler: CommandHandler = get_dependencies()['command_handler']
    handler.handle_status(namespace)

@cache_app.command(name="clear")
def clear_command(
    namespace: Annotated[
        Optional[str],
        typer.Argument(help="Namespace to clear (e.g. 'grind75'). Clears all when omitted.", callback=validate_namespace)
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation when clearing everything.")
    ] = False,
):
    """Clear one namespace, or every cache namespace."""
    handler: CommandHandler = get_dependencies()['command_handler']
    run_async(handler.handle_clear(namespace, assume_yes=yes))

@cache_app.command(name="invalidate")
def invalidate_command(
    namespace: Annotated[str, typer.Argument(help="Namespace holding the entry.", callback=validate_namespace)],
    identifier: Annotated[str, typer.Argument(help="Identifier the entry was cached under.")],
):
    """Remove a single cached entry."""
    handler: CommandHandler = get_dependencies()['command_handler']
    run_async(handler.handle_invalidate(namespace, identifier))

@cache_app.command(name="cleanup")
def cleanup_command():
    """Delete expired entries from every namespace."""
    handler: CommandHandler = get_dependencies()['command_handler']
    run_async(handler.handle_cleanup())

# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()

if __name__ == "__main__":
    cli_entry_point()
