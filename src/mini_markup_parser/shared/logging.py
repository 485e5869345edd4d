"""Structured logging utilities for markup parsing.

Records emitted through :class:`CorrelationLogger` carry a ``component`` and a
``correlation_id`` attribute, plus any fields bound to the logger, so that a
handler or formatter can group every record belonging to one parse request.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional


class CorrelationLogger:
    """Logger that automatically includes correlation ID and component information."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        **fields: Any
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name, defaults to the last segment of ``name``
            **fields: Extra attributes attached to every record
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]
        self.fields = fields

    def bind(self, correlation_id: Optional[str] = None, **fields: Any) -> "CorrelationLogger":
        """Return a logger for the same component under another correlation ID.

        Fields already bound are kept; ``fields`` are added on top.
        """
        return CorrelationLogger(
            self.logger.name,
            correlation_id,
            self.component,
            **{**self.fields, **fields}
        )

    def _log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]],
        exc_info: bool
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        record_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
            **self.fields,
            **(extra or {}),
        }
        self.logger.log(level, message, extra=record_extra, exc_info=exc_info)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra, False)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra, False)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, extra, False)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log at ERROR level with the active exception's traceback."""
        self._log(logging.ERROR, message, extra, True)

    @contextmanager
    def timed(self, operation: str, level: int = logging.DEBUG) -> Iterator[Dict[str, Any]]:
        """Log ``operation`` with its duration when the block exits.

        The yielded dictionary is merged into the record, so the block can
        report figures it only learns while running.

        Example:
            >>> with get_logger(__name__).timed("batch") as fields:
            ...     fields["files"] = 3
        """
        fields: Dict[str, Any] = {}
        start_time = time.perf_counter()
        try:
            yield fields
        finally:
            fields["duration_ms"] = (time.perf_counter() - start_time) * 1000
            self._log(level, f"{operation} finished", fields, False)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance."""
    return CorrelationLogger(name, correlation_id, component)
