"""
Engine Configuration
====================

Unified configuration for every layer. Each layer receives only its own
section; the root fills in defaults for anything left unset.

ENVIRONMENT OVERRIDES:
======================
- MINDGRAPH_STORAGE_BACKEND      "memory" or "file"
- MINDGRAPH_STORAGE_DIR          directory for the file backend
- MINDGRAPH_AUTOSAVE_DEBOUNCE_MS autosave quiet period in milliseconds
- MINDGRAPH_HISTORY_LIMIT        max snapshots kept (unset = unbounded)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional
import os


@dataclass
class LayoutConfig:
    """Geometry constants for both layout algorithms."""
    radial_base_radius: float = 280.0
    radial_growth: float = 1.2
    column_spacing: float = 280.0
    row_spacing: float = 140.0


@dataclass
class HistoryConfig:
    max_snapshots: Optional[int] = None

    def __post_init__(self):
        if self.max_snapshots is not None and self.max_snapshots < 1:
            raise ValueError("max_snapshots must be at least 1")


@dataclass
class TemplateConfig:
    """Grid used to pre-place template nodes before layout."""
    sections_per_row: int = 3
    section_spacing: float = 350.0
    child_spacing: float = 100.0
    child_offset_x: float = 300.0
    layout_delay: float = 0.15  # seconds


@dataclass
class StorageConfig:
    backend_type: str = "memory"  # "memory" or "file"
    storage_dir: Optional[str] = None
    debounce_seconds: float = 0.5

    def __post_init__(self):
        if self.backend_type not in ("memory", "file"):
            raise ValueError(f"Unknown storage backend: {self.backend_type}")
        if self.backend_type == "file" and not self.storage_dir:
            raise ValueError("file storage backend requires storage_dir")
        if self.debounce_seconds < 0:
            raise ValueError("debounce_seconds must be non-negative")


@dataclass
class NodeDefaults:
    """Placement offsets and labels for nodes created by editing actions."""
    label: str = "New Node"
    child_offset: tuple = (200.0, 120.0)
    sibling_offset: tuple = (220.0, 0.0)
    attach_offset: tuple = (220.0, 40.0)
    duplicate_offset: tuple = (40.0, 40.0)
    initial_label: str = "Central Idea"


@dataclass
class EngineConfig:
    """Root configuration for a board session."""
    layout: LayoutConfig = None
    history: HistoryConfig = None
    templates: TemplateConfig = None
    storage: StorageConfig = None
    nodes: NodeDefaults = None

    def __post_init__(self):
        self.layout = self.layout or LayoutConfig()
        self.history = self.history or HistoryConfig()
        self.templates = self.templates or TemplateConfig()
        self.storage = self.storage or StorageConfig()
        self.nodes = self.nodes or NodeDefaults()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
        """Defaults overlaid with MINDGRAPH_* environment variables."""
        env = os.environ if environ is None else environ

        backend_type = env.get("MINDGRAPH_STORAGE_BACKEND", "memory")
        storage_dir = env.get("MINDGRAPH_STORAGE_DIR")
        if storage_dir and "MINDGRAPH_STORAGE_BACKEND" not in env:
            backend_type = "file"

        debounce_seconds = 0.5
        raw_debounce = env.get("MINDGRAPH_AUTOSAVE_DEBOUNCE_MS")
        if raw_debounce is not None:
            debounce_seconds = _parse_int("MINDGRAPH_AUTOSAVE_DEBOUNCE_MS", raw_debounce) / 1000.0

        max_snapshots = None
        raw_limit = env.get("MINDGRAPH_HISTORY_LIMIT")
        if raw_limit:
            max_snapshots = _parse_int("MINDGRAPH_HISTORY_LIMIT", raw_limit)

        return cls(
            storage=StorageConfig(
                backend_type=backend_type,
                storage_dir=storage_dir,
                debounce_seconds=debounce_seconds,
            ),
            history=HistoryConfig(max_snapshots=max_snapshots),
        )


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
