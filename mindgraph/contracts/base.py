"""
Base Contracts and Shared Types

These are the foundational types used across all layers.
All types here are IMMUTABLE and represent pure data.
No behavior, no side effects, no dependencies.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- Layers may import types but MUST NOT modify this module
- All types are frozen dataclasses for immutability guarantee
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple
from enum import Enum, auto
import math


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for recoverable engine failures.
    Every recovery path in the engine maps to exactly one code.
    """
    # Document errors
    MALFORMED_DOCUMENT = auto()
    UNSUPPORTED_VERSION = auto()
    DUPLICATE_ID = auto()
    PAYLOAD_TYPE_MISMATCH = auto()

    # Template errors
    UNKNOWN_TEMPLATE = auto()

    # Storage errors
    STORAGE_WRITE_FAILED = auto()
    STORAGE_READ_FAILED = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and queried.
    """
    code: ErrorCode
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            timestamp=self.timestamp,
            context=self.context + ((key, value),)
        )


@dataclass(frozen=True)
class Result:
    """
    Generic result type for operations that can fail.
    Either contains a value OR an error, never both.
    """
    value: Optional[object] = None
    error: Optional[Error] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @staticmethod
    def success(value: object) -> Result:
        return Result(value=value, error=None)

    @staticmethod
    def failure(error: Error) -> Result:
        return Result(value=None, error=error)


# =============================================================================
# GEOMETRY
# =============================================================================

@dataclass(frozen=True)
class Position:
    """Canvas position. Coordinates must be finite."""
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self):
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"Position must be finite, got ({self.x}, {self.y})")

    def offset(self, dx: float, dy: float) -> Position:
        return Position(x=self.x + dx, y=self.y + dy)

    @staticmethod
    def origin() -> Position:
        return Position(0.0, 0.0)


# =============================================================================
# CLASSIFICATIONS (Explicit, closed sets)
# =============================================================================

class NodeType(Enum):
    """Node kinds. Each kind owns exactly one payload variant."""
    GENERIC = "generic"
    NOTE = "note"
    CHECKLIST = "checklist"
    KANBAN = "kanban"
    TIMELINE = "timeline"
    MATRIX = "matrix"


class EdgeType(Enum):
    """Edge rendering styles."""
    PLAIN = "plain"
    SMOOTHSTEP = "smoothstep"
    LABELED = "labeled"


class MutationOrigin(Enum):
    """
    Where a graph mutation came from.

    HISTORY_REPLAY mutations are produced by undo/redo and are never
    recorded back into history.
    """
    USER_EDIT = "user_edit"
    HISTORY_REPLAY = "history_replay"


class LayoutKind(Enum):
    """Available layout algorithms."""
    RADIAL = "radial"
    HIERARCHICAL = "hierarchical"


class Axis(Enum):
    """Alignment axis for selection tools."""
    X = "x"
    Y = "y"
