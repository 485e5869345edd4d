"""Result objects and diagnostic types for markup parsing.

The core parser raises on the first violation. The API layer wraps each
parse in a :class:`ParseResult` so that callers who prefer not to handle
exceptions get either a complete tree or a failed result carrying the error,
never a partial tree.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from mini_markup_parser.dom.node import Node
from mini_markup_parser.dom.render import to_dict
from mini_markup_parser.dom.traversal import tree_statistics

if TYPE_CHECKING:
    from mini_markup_parser.parsing.errors import ParseError


class DiagnosticSeverity(Enum):
    """How serious a diagnostic is; CRITICAL means the parse produced no tree."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """One message attached to a ParseResult, tagged with the component that emitted it."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.position is not None:
            result["position"] = dict(self.position)
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class PerformanceMetrics:
    """Performance metrics for a parse operation."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    bytes_processed: int = 0
    nodes_created: int = 0

    @property
    def characters_per_second(self) -> float:
        """Throughput in source characters per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def nodes_per_second(self) -> float:
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.nodes_created * 1000.0) / self.processing_time_ms


@dataclass
class ParseResult:
    """Outcome of a parse: the complete tree, or the error that aborted it."""

    root: Optional[Node] = None
    success: bool = True
    error: Optional["ParseError"] = None

    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None
    source_name: Optional[str] = None

    def __post_init__(self) -> None:
        """Keep ``success`` consistent with the presence of a tree."""
        if self.root is None or self.error is not None:
            self.success = False

    def unwrap(self) -> Node:
        """Return the root node, re-raising the parse error on failure."""
        if self.error is not None:
            raise self.error
        if self.root is None:
            raise ValueError(self.error_message or "Parse produced no tree")
        return self.root

    @property
    def error_message(self) -> Optional[str]:
        """Message of the first critical diagnostic, if any."""
        critical = self.get_diagnostics_by_severity(DiagnosticSeverity.CRITICAL)
        return critical[0].message if critical else None

    @property
    def statistics(self) -> Dict[str, Any]:
        if self.root is None:
            return {
                "element_count": 0,
                "text_count": 0,
                "attribute_count": 0,
                "max_depth": 0,
                "tag_distribution": {},
            }
        return tree_statistics(self.root)

    @property
    def element_count(self) -> int:
        return self.statistics["element_count"]

    @property
    def text_count(self) -> int:
        return self.statistics["text_count"]

    @property
    def max_depth(self) -> int:
        return self.statistics["max_depth"]

    @property
    def processing_time_ms(self) -> float:
        return self.performance.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Append a diagnostic stamped with this result's correlation ID."""
        entry = DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id
        )
        self.diagnostics.append(entry)

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """True if any ERROR or CRITICAL diagnostic was recorded."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    @property
    def parsing_statistics(self) -> Dict[str, Any]:
        """Tree statistics merged with performance figures."""
        stats = dict(self.statistics)
        stats.update({
            "processing_time_ms": self.performance.processing_time_ms,
            "characters_processed": self.performance.characters_processed,
            "bytes_processed": self.performance.bytes_processed,
            "nodes_created": self.performance.nodes_created,
        })
        return stats

    def to_dict(self, include_tree: bool = True) -> Dict[str, Any]:
        """Convert result to a JSON-ready dictionary."""
        result: Dict[str, Any] = {
            "success": self.success,
            "statistics": self.parsing_statistics,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }
        if self.source_name is not None:
            result["source"] = self.source_name
        if self.error is not None:
            result["error"] = self.error.to_dict()
        if include_tree and self.root is not None:
            result["root"] = to_dict(self.root)
        return result
