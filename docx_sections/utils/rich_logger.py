"""
Rich console output for the docx-sections command line.

Provides colorful logging and summary tables using the rich library.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table


class RichLogger:
    """
    Logging with rich formatting and colors.
    """
    
    def __init__(self, name: str = "docx_sections", level: str = "INFO",
                 console: Optional[Console] = None):
        """
        Initialize rich logger.
        
        Args:
            name: Logger name
            level: Log level
            console: Console to print to (a new stderr console if None)
        """
        self.name = name
        self.level = level
        self.console = console or Console(stderr=True)

        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.logger.handlers.clear()
        self._setup_rich_handler()

    def _setup_rich_handler(self):
        """Setup rich handler."""
        rich_handler = RichHandler(
            console=self.console,
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True
        )
        rich_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
        self.logger.addHandler(rich_handler)

    def success(self, message: str):
        self.console.print(f"[green]✓ {escape(message)}[/green]")

    def failure(self, message: str):
        self.console.print(f"[red]✗ {escape(message)}[/red]")

    def table(self, title: str, data: Dict[str, Any]):
        """Display key/value data in a rich table."""
        table = Table(title=title)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="magenta")
        for key, value in data.items():
            table.add_row(str(key), str(value))
        self.console.print(table)

    def rows(self, title: str, columns: List[str], rows: Iterable[Iterable[Any]]):
        """Display tabular data in a rich table."""
        table = Table(title=title)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*(str(cell) for cell in row))
        self.console.print(table)


def get_rich_logger(name: str = "docx_sections", level: str = "INFO",
                    console: Optional[Console] = None) -> RichLogger:
    """
    Get rich logger instance.
    
    Args:
        name: Logger name
        level: Log level
        console: Optional console to print to
        
    Returns:
        RichLogger instance
    """
    return RichLogger(name, level, console)
