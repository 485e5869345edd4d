"""Shared utilities for markup parsing.

This module provides the configuration object, result and diagnostic types,
and the correlation-aware logger used across the parser, API and CLI layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseResult,
    PerformanceMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ParseResult",
    "PerformanceMetrics",
]
