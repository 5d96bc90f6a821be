"""Central configuration for the wizard engine and its bundled hosts.

Values are read from the environment once at import time; a ``.env`` file in
the working directory is loaded first so local overrides do not need to be
exported by hand.

``WIZARD_LOG_LEVEL`` sets the level used by :func:`utils.logging_context.configure_logging`
in the command line entry points. ``WIZARD_ESTIMATE_STEPS`` toggles the
``(current/total)`` step estimate passed to prompters. ``WIZARD_BACK_KEYWORD``
is the text the console host treats as "go back".
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()


logger = logging.getLogger(__name__)


_TRUTHY_ENV_VALUES: tuple[str, ...] = ("1", "true", "yes", "on")
_FALSY_ENV_VALUES: tuple[str, ...] = ("0", "false", "no", "off")
_LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_BACK_KEYWORD = "<"


def parse_flag(value: str | None, *, default: bool, env_var: str) -> bool:
    """Return the boolean encoded in ``value`` or ``default`` when unset/invalid."""

    if value is None or not value.strip():
        return default
    lowered = value.strip().lower()
    if lowered in _TRUTHY_ENV_VALUES:
        return True
    if lowered in _FALSY_ENV_VALUES:
        return False
    logger.warning("Ignoring invalid %s value %r", env_var, value)
    return default


def normalise_log_level(value: str | None) -> str:
    """Return a valid logging level name, defaulting to ``INFO``."""

    if value is None:
        return DEFAULT_LOG_LEVEL
    candidate = value.strip().upper()
    if candidate == "WARN":
        candidate = "WARNING"
    if candidate in _LOG_LEVELS:
        return candidate
    if candidate:
        logger.warning("Unknown WIZARD_LOG_LEVEL %r; using %s", value, DEFAULT_LOG_LEVEL)
    return DEFAULT_LOG_LEVEL


def normalise_back_keyword(value: str | None) -> str:
    if value is None:
        return DEFAULT_BACK_KEYWORD
    stripped = value.strip()
    return stripped or DEFAULT_BACK_KEYWORD


LOG_LEVEL = normalise_log_level(os.getenv("WIZARD_LOG_LEVEL"))
ESTIMATE_STEPS = parse_flag(os.getenv("WIZARD_ESTIMATE_STEPS"), default=True, env_var="WIZARD_ESTIMATE_STEPS")
BACK_KEYWORD = normalise_back_keyword(os.getenv("WIZARD_BACK_KEYWORD"))


__all__ = [
    "BACK_KEYWORD",
    "DEFAULT_BACK_KEYWORD",
    "DEFAULT_LOG_LEVEL",
    "ESTIMATE_STEPS",
    "LOG_LEVEL",
    "normalise_back_keyword",
    "normalise_log_level",
    "parse_flag",
]
