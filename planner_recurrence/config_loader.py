"""planner_recurrence.config_loader

Lightweight config loader for the recurrence engine.

- Reads YAML through PyYAML (JSON documents are valid YAML too).
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

# None leaves generation bounded only by the window and the end condition
DEFAULT_MAX_INSTANCES: Optional[int] = None


@dataclass
class Config:
    """Typed configuration for the recurrence engine.

    Fields:
        max_instances: optional ceiling on occurrences emitted per generation call
        log_level: logging level name
        debug: enable debug logging for planner_recurrence modules
    """

    max_instances: Optional[int] = DEFAULT_MAX_INSTANCES
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Numeric-like values are coerced to int; an unparsable max_instances or
        one below 1 leaves the cap unset. Every coercion is logged as a warning.
        """
        if data is None:
            data = {}

        raw_max = data.get("max_instances", DEFAULT_MAX_INSTANCES)
        max_instances: Optional[int] = None
        if raw_max is not None:
            try:
                max_instances = int(raw_max)
            except (TypeError, ValueError):
                logger.warning("Config max_instances=%r is not an int; leaving the cap unset", raw_max)
            if max_instances is not None and max_instances < 1:
                logger.warning("max_instances %d below minimum; leaving the cap unset", max_instances)
                max_instances = None

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"

        debug_raw = data.get("debug", False)
        if isinstance(debug_raw, str):
            debug = debug_raw.strip().lower() in ("1", "true", "yes", "on")
        else:
            debug = bool(debug_raw)

        return cls(max_instances=max_instances, log_level=log_level, debug=debug)


def _load_yaml(path: Path) -> Any:
    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    # safe_load returns None for empty files
    if loaded is None:
        return {}
    return loaded


def load_config(path: str | None = None) -> Config:
    """Load configuration from a YAML/JSON file and return a Config instance.

    Args:
        path: Optional path to the config file. Defaults to
              ./planner_recurrence.yaml in the current working directory.

    Returns:
        Config dataclass instance with values from file (or defaults).

    Behavior:
    - If file is missing: returns Config() with defaults.
    - If file exists but top-level is not a mapping: raises ValueError.
    """
    p = Path(path) if path else Path.cwd() / "planner_recurrence.yaml"
    logger.debug("Attempting to load config from %s", p)
    if not p.exists():
        logger.info("Config file %s not found; using defaults", p)
        return Config()

    raw = _load_yaml(p)
    if not isinstance(raw, dict):
        logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
        raise ValueError("Config file must contain a mapping at top level")  # noqa: TRY004
    cfg = Config.from_dict(raw)
    logger.info("Loaded configuration from %s", p)
    logger.debug("Configuration values: %s", cfg)
    return cfg
