"""Selection validation at commit time."""

from readmark.selection.validator import (
    BoundaryAnalysis,
    PositionDebugInfo,
    SelectionSnapshot,
    ValidationResult,
    validate,
)

__all__ = [
    "BoundaryAnalysis",
    "PositionDebugInfo",
    "SelectionSnapshot",
    "ValidationResult",
    "validate",
]
