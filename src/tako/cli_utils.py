"""CLI utility functions for tako.

This module provides common utilities used across CLI commands including:
- Logging setup
- Error handling and formatting
- Project directory validation
"""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Setup logging for the CLI.

    Only warnings reach the console unless verbose is set, in which case
    the build internals are logged at DEBUG level.
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)


class ErrorFormatter:
    """Formats and displays status messages with ANSI color codes.

    Errors and warnings go to stderr, success messages to stdout.
    """

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    CYAN = "\033[1;36m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(message: str) -> None:
        """Print a one-line error message.

        Args:
            message: Error description
        """
        print(
            f"{ErrorFormatter.RED}✗ Error:{ErrorFormatter.RESET} {message}",
            file=sys.stderr,
        )

    @staticmethod
    def print_success(message: str) -> None:
        """Print formatted success message.

        Args:
            message: Success message
        """
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        """Print formatted warning message.

        Args:
            message: Warning message (may span several lines)
        """
        print(
            f"{ErrorFormatter.YELLOW}Warning:{ErrorFormatter.RESET} {message}",
            file=sys.stderr,
        )

    @staticmethod
    def print_step(verb: str, rest: str, color: str = GREEN) -> None:
        """Print a progress line such as 'Building TAKO contract...'.

        Args:
            verb: Highlighted leading word
            rest: Remainder of the line
            color: ANSI color for the verb
        """
        print(f"{color}{verb}{ErrorFormatter.RESET} {rest}")

    @staticmethod
    def handle_file_not_found(error: FileNotFoundError) -> None:
        """Handle FileNotFoundError with standard formatting.

        Args:
            error: The FileNotFoundError to handle
        """
        ErrorFormatter.print_error(f"File not found: {error}")
        sys.exit(1)

    @staticmethod
    def handle_permission_error(error: PermissionError) -> None:
        """Handle PermissionError with standard formatting.

        Args:
            error: The PermissionError to handle
        """
        ErrorFormatter.print_error(f"Permission denied: {error}")
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        ErrorFormatter.print_error(f"Unexpected error: {type(error).__name__}: {error}")

        if verbose:
            import traceback

            print("Traceback:", file=sys.stderr)
            print(traceback.format_exc(), file=sys.stderr)

        sys.exit(1)


class PathValidator:
    """Validates project paths and directories."""

    @staticmethod
    def validate_project_dir(project_dir: Path) -> None:
        """Validate that project directory exists and is a directory.

        Args:
            project_dir: Path to validate

        Raises:
            SystemExit: If path doesn't exist or isn't a directory
        """
        if not project_dir.exists():
            ErrorFormatter.print_error(f"Path does not exist: {project_dir}")
            sys.exit(2)
        if not project_dir.is_dir():
            ErrorFormatter.print_error(f"Path is not a directory: {project_dir}")
            sys.exit(2)
