"""
Central logging configuration for planner_recurrence.

Keeps generator diagnostics at INFO by default and lets DEBUG be switched on
through the environment when tracing why a rule produced (or skipped) dates.
"""

import logging
import os
from typing import Optional

PACKAGE_LOGGERS = [
    "planner_recurrence",
    "planner_recurrence.instance_generator",
    "planner_recurrence.next_occurrence",
    "planner_recurrence.pattern_codec",
    "planner_recurrence.config_loader",
]


def configure_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """
    Configure logging levels for planner_recurrence modules.

    Args:
        debug_mode: Whether to enable debug logging for planner_recurrence modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        PLANNER_RECURRENCE_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        PLANNER_RECURRENCE_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("PLANNER_RECURRENCE_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("PLANNER_RECURRENCE_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add a handler if none exist, so host applications keep their own setup
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        handler.setFormatter(
            logging.Formatter("[%(asctime)s] %(levelname)s - %(name)s - %(message)s")
        )
        root_logger.addHandler(handler)

    package_level = logging.DEBUG if final_debug else logging.INFO
    for logger_name in PACKAGE_LOGGERS:
        logging.getLogger(logger_name).setLevel(package_level)

    if final_debug:
        root_logger.info("Debug logging enabled for planner_recurrence modules")


def configure_from_config(config: object) -> None:
    """Apply the `debug` and `log_level` values of a loaded Config."""
    configure_logging(debug_mode=bool(getattr(config, "debug", False)))
    level_name = str(getattr(config, "log_level", "") or "").upper()
    if level_name in ("DEBUG", "INFO", "WARNING", "ERROR") and not os.getenv("PLANNER_RECURRENCE_LOG_LEVEL"):
        logging.getLogger().setLevel(getattr(logging, level_name))


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for logger_name in PACKAGE_LOGGERS:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)
    return status
