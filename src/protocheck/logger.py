"""Logger with CLI output helpers for protocheck."""

import json
import logging
from typing import Any

from rich.console import Console


class ProtocheckLogger(logging.Logger):
    """
    Logger that adds CLI formatting methods to the standard logging levels.

    Records propagate to the handlers configured by ``logging.basicConfig``;
    the CLI output methods (success, hint, rule, print_json) print straight
    to a rich Console.
    """

    def __init__(self, name: str, level: int = logging.NOTSET) -> None:
        super().__init__(name, level)
        self.console = Console()

    def print(self, message: str) -> None:
        """
        Print a plain message (with Rich markup support).

        Args:
            message: Message to display
        """
        self.console.print(message)

    def colored(self, message: str, style: str = "bold cyan") -> None:
        self.print(f"[{style}]{message}[/{style}]")

    def success(self, message: str) -> None:
        """
        Print a success message in green with checkmark icon.

        Args:
            message: Message to display
        """
        self.print(f"[green]✓[/green] {message}")

    def hint(self, message: str) -> None:
        self.colored(message, "dim")

    def rule(self, title: str, style: str = "bold blue") -> None:
        """
        Print a horizontal rule with a title.

        Args:
            title: Title text for the rule
            style: Rich style string (default: "bold blue")
        """
        self.console.rule(f"[{style}]{title}")

    def print_json(self, data: Any) -> None:
        """
        Print JSON-serializable data with syntax highlighting.

        Args:
            data: Data to display
        """
        self.console.print_json(json.dumps(data, indent=2))


def get_logger(name: str = "protocheck") -> ProtocheckLogger:
    """
    Get or create a protocheck logger instance.

    Args:
        name: Logger name (default: "protocheck")

    Returns:
        ProtocheckLogger instance
    """
    previous = logging.getLoggerClass()
    logging.setLoggerClass(ProtocheckLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous)

    if not isinstance(logger, ProtocheckLogger):
        raise TypeError(f"Logger '{name}' was created before protocheck configured its logger class")
    return logger
