"""
Shared utilities for CLI commands.

Provides log rendering for GitHub Actions and the translation from parsed
arguments to the effective configuration.
"""

import logging
import os
from typing import Any, Dict, Mapping, Optional

from swiftsetup.config.settings import SetupConfig, load_config

logger = logging.getLogger(__name__)


# ============================================================================
# Logging
# ============================================================================


def running_in_actions(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Whether this process runs as a GitHub Actions step."""
    environ = environ if environ is not None else os.environ
    return environ.get("GITHUB_ACTIONS", "").lower() == "true"


def escape_data(message: str) -> str:
    """Escape a message for use in a workflow command."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionsLogFormatter(logging.Formatter):
    """
    Renders log records as GitHub Actions workflow commands.

    INFO records are printed as plain text; DEBUG, WARNING and ERROR records
    become `::debug::`, `::warning::` and `::error::` commands.
    """

    COMMANDS = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def __init__(self):
        super().__init__("%(message)s")

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = self.COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{escape_data(message)}"


# ============================================================================
# Configuration
# ============================================================================


def load_setup_config(args, **overrides: Any) -> SetupConfig:
    """
    Load configuration for a command.

    Args:
        args: Parsed arguments (reads the global --config option)
        **overrides: Command-line values; None means "not given"

    Returns:
        Effective configuration
    """
    config_path = getattr(args, "config", None)
    values: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}

    config = load_config(config_path, overrides=values)
    logger.debug(f"Effective configuration: {config}")
    return config
