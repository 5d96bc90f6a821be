"""Attach the wizard run and the field being visited to every log record.

The step engine binds ``wizard_run`` for a whole run and ``wizard_step`` for
each field through :func:`log_context`; both read ``-`` outside a run.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator

_DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [run=%(wizard_run)s step=%(wizard_step)s] %(name)s: %(message)s"

_wizard_run_var: contextvars.ContextVar[str] = contextvars.ContextVar("wizard_run", default="-")
_wizard_step_var: contextvars.ContextVar[str] = contextvars.ContextVar("wizard_step", default="-")
_DEFAULT_RECORD_FACTORY = logging.getLogRecordFactory()
_RECORD_FACTORY_INSTALLED = False


def _apply_context(record: logging.LogRecord) -> None:
    record.wizard_run = _wizard_run_var.get("-")
    record.wizard_step = _wizard_step_var.get("-")


class _ContextFilter(logging.Filter):
    """Inject contextual fields into log records for consistent formatting."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - logging protocol
        _apply_context(record)
        return True


def _coerce(value: str | None) -> str:
    if value is None:
        return "-"
    stripped = value.strip()
    return stripped or "-"


def configure_logging(*, level: int | str = logging.INFO) -> None:
    """Ensure the root logger formats records with wizard context metadata."""

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=_DEFAULT_LOG_FORMAT)
        root = logging.getLogger()
    for handler in root.handlers:
        formatter = handler.formatter or logging.Formatter(_DEFAULT_LOG_FORMAT)
        handler.setFormatter(formatter)
    has_filter = any(isinstance(flt, _ContextFilter) for flt in root.filters)
    if not has_filter:
        root.addFilter(_ContextFilter())
    global _RECORD_FACTORY_INSTALLED
    if not _RECORD_FACTORY_INSTALLED:
        default_factory = _DEFAULT_RECORD_FACTORY

        def _record_factory(*args: object, **kwargs: object) -> logging.LogRecord:
            record = default_factory(*args, **kwargs)
            _apply_context(record)
            return record

        logging.setLogRecordFactory(_record_factory)
        _RECORD_FACTORY_INSTALLED = True


def set_wizard_run(run_id: str | None) -> None:
    """Bind a wizard run identifier for subsequent log records."""

    configure_logging()
    _wizard_run_var.set(_coerce(run_id))


@contextmanager
def log_context(
    *,
    wizard_run: str | None = None,
    wizard_step: str | None = None,
) -> Iterator[None]:
    """Temporarily override logging context variables."""

    tokens: list[tuple[contextvars.ContextVar[str], contextvars.Token[str]]] = []
    if wizard_run is not None:
        tokens.append((_wizard_run_var, _wizard_run_var.set(_coerce(wizard_run))))
    if wizard_step is not None:
        tokens.append((_wizard_step_var, _wizard_step_var.set(_coerce(wizard_step))))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


__all__ = ["configure_logging", "log_context", "set_wizard_run"]
