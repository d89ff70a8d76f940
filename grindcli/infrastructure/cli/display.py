import logging
from datetime import datetime
from typing import Optional, Any

from rich.console import Console
from rich.panel import Panel
from rich.box import ROUNDED, HEAVY, SIMPLE
from rich.text import Text
from rich.table import Table

from grindcli.domain.interfaces.user_interface import UserInterface
from grindcli.domain.models.cache import CacheStatusReport

logger = logging.getLogger(__name__)

_BYTE_UNITS = ["Bytes", "KB", "MB", "GB"]

def format_bytes(size: int) -> str:
    """Human-readable byte count ('0 Bytes', '1.5 KB', '100 MB')."""
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_BYTE_UNITS[unit]}"

def format_timestamp(timestamp: Optional[float]) -> str:
    if timestamp is None:
        return "-"
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")

class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        """Initializes the rich Console."""
        self._console = console or Console()

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message with enhanced styling.

        Args:
            info_message: The informational message to display.
        """
        panel = Panel(
            Text(info_message, style="white"),
            title="[bold blue]Info[/bold blue]",
            border_style="blue",
            box=SIMPLE,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message with enhanced styling.

        Args:
            warning_message: The warning message to display.
        """
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_success(self, message: str, **kwargs: Any) -> None:
        self.console.print(f"[bold green]✅ {message}[/bold green]")

    def display_cache_status(self, report: CacheStatusReport) -> None:
        """Renders the memory tier and each namespace of the file tier as tables.

        Args:
            report: The report returned by CacheService.get_cache_status.
        """
        memory = report.memory_cache
        memory_table = Table(title="🧠 Memory Cache", show_header=False, box=ROUNDED, border_style="cyan")
        memory_table.add_column("Metric", style="bold cyan")
        memory_table.add_column("Value")
        memory_table.add_row("Entries", str(memory.entries))
        memory_table.add_row("Size", f"{format_bytes(memory.size)} / {format_bytes(memory.max_size)}")
        memory_table.add_row("Usage", f"{round(memory.usage_percent)}%")

        file_table = Table(title="📁 File Cache", box=ROUNDED, border_style="cyan")
        file_table.add_column("Namespace", style="bold")
        file_table.add_column("Entries", justify="right")
        file_table.add_column("Valid", justify="right")
        file_table.add_column("Size", justify="right")
        file_table.add_column("Oldest")
        file_table.add_column("Newest")
        for namespace, status in report.file_cache.items():
            file_table.add_row(
                namespace,
                str(status.total_entries),
                str(status.valid_entries),
                format_bytes(status.total_size),
                format_timestamp(status.oldest_entry),
                format_timestamp(status.newest_entry),
            )

        self.console.print("")
        self.console.print(memory_table)
        self.console.print(file_table)

    def ask_yes_no_question(self, question: str) -> bool:
        """Asks a yes/no question and returns the answer.

        Args:
            question: The question to ask

        Returns:
            True if the answer is yes, False otherwise
        """
        logger.debug(f"Asking yes/no question: {question}")
        panel = Panel(
            Text(f"{question} (y/n)", style="white"),
            title="[bold yellow]Question[/bold yellow]",
            border_style="yellow",
            box=ROUNDED,
            padding=(0, 1)
        )
        self.console.print(panel)
        response = self.console.input("[bold yellow]> [/bold yellow]").strip().lower()
        return response in ('y', 'yes')
