"""
Logging setup for gitprops.

This module configures console logging for the command line and renders
extracted properties to the log when verbose mode is on.

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

if TYPE_CHECKING:
	from collections.abc import Mapping

# Initialize console for rich output
console = Console(stderr=True)

logger = logging.getLogger(__name__)

PROPERTIES_HEADER = "------------------git properties loaded------------------"
PROPERTIES_FOOTER = "---------------------------------------------------------"


def setup_logging(is_verbose: bool = False) -> None:
	"""
	Set up logging configuration.

	Args:
	    is_verbose: Enable verbose logging

	"""
	log_level = logging.DEBUG if is_verbose else logging.WARNING

	root_logger = logging.getLogger()
	root_logger.setLevel(log_level)

	# Clear existing handlers to avoid duplicate logs if called multiple times
	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)

	console_handler = RichHandler(
		console=console,
		level=log_level,
		rich_tracebacks=True,
		show_time=True,
		show_path=is_verbose,
	)
	root_logger.addHandler(console_handler)


def log_properties(properties: Mapping[str, str], verbose: bool) -> None:
	"""
	Log every property as ``key = value`` between a header and a footer.

	Does nothing unless ``verbose`` is set. Properties are logged in the
	mapping's own order.

	Args:
	    properties: The properties to log
	    verbose: Whether to log at all

	"""
	if not verbose:
		return

	logger.info(PROPERTIES_HEADER)
	for key, value in properties.items():
		logger.info("%s = %s", key, value)
	logger.info(PROPERTIES_FOOTER)


def display_error_summary(error_message: str) -> None:
	"""
	Display an error summary with a divider and a title.

	Args:
	        error_message: The error message to display

	"""
	title = Text("Error Summary", style="bold red")

	console.print()
	console.print(Rule(title, style="red"))
	console.print(f"\n{error_message}\n", markup=False)
	console.print(Rule(style="red"))
	console.print()
