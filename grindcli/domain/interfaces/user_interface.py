"""Interface for interacting with the user (input/output).

Defines the contract for displaying information, errors, warnings,
cache reports, and asking for confirmation, allowing different UI
implementations (e.g., console, GUI).
"""

import abc
from typing import Any

# Import relevant domain models
from grindcli.domain.models.cache import CacheStatusReport

class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user.

        Args:
            error_message: The error message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user.

        Args:
            warning_message: The warning message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user.

        Args:
            info_message: The informational message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_success(self, message: str, **kwargs: Any) -> None:
        """Displays a message confirming a completed action."""
        pass

    @abc.abstractmethod
    def display_cache_status(self, report: CacheStatusReport) -> None:
        """Renders a cache status report.

        Args:
            report: Memory tier occupancy and per-namespace file totals.
        """
        pass

    @abc.abstractmethod
    def ask_yes_no_question(self, question: str) -> bool:
        """Asks a yes/no question and returns the answer.

        Args:
            question: The question to ask

        Returns:
            True if the answer is yes, False otherwise
        """
        pass
