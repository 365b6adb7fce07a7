"""
Board Storage Layer

RESPONSIBILITY: Persist graph documents and saved templates
ALLOWED INPUTS: JSON-shaped documents produced by the codec
OUTPUTS: StorageWriteResult, Result[document]

WHAT THIS LAYER MUST NOT DO:
============================
- Interpret graph contents (the codec owns the document shape)
- Raise on I/O failure (failures are returned as data and logged)
- Touch in-memory graph state

BOUNDARY ENFORCEMENT:
=====================
- Backends store and return plain documents, never Graph objects
- One document per board id; saved templates live beside the boards
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import copy
import json
import logging
import os
import re

from ..config import StorageConfig
from ..contracts.base import Error, ErrorCode, Result
from .autosave import AutosaveScheduler
from .serialization import (
    DOCUMENT_FORMAT, DOCUMENT_VERSION, GraphDocumentEncoder,
    encode_graph, decode_graph, dumps_graph, loads_graph,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageWriteResult:
    """Outcome of a single write."""
    success: bool
    key: Optional[str] = None
    error: Optional[Error] = None
    write_timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# =============================================================================
# STORAGE INTERFACES (Dependency Inversion)
# =============================================================================

class GraphStorageBackend:
    """
    Abstract storage backend interface.

    Implementations can use different storage systems (memory, file)
    while keeping the same document semantics.
    """

    def write_board(self, board_id: str, document: Dict[str, Any]) -> StorageWriteResult:
        """Store the latest document for a board, replacing any previous one."""
        raise NotImplementedError

    def read_board(self, board_id: str) -> Result:
        """Result[document or None]; None means the board was never saved."""
        raise NotImplementedError

    def delete_board(self, board_id: str) -> bool:
        raise NotImplementedError

    def list_boards(self) -> List[str]:
        raise NotImplementedError

    def write_template(self, record: Dict[str, Any]) -> StorageWriteResult:
        """Insert or replace a saved-template record keyed by its "id"."""
        raise NotImplementedError

    def read_templates(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def delete_template(self, template_id: str) -> bool:
        raise NotImplementedError


# =============================================================================
# IN-MEMORY STORAGE BACKEND (Reference Implementation)
# =============================================================================

class InMemoryGraphStorage(GraphStorageBackend):
    """
    In-memory backend.

    Stores deep copies so callers can keep mutating their documents.
    Suitable for tests and ephemeral sessions.
    """

    def __init__(self):
        self._boards: Dict[str, Dict[str, Any]] = {}
        self._templates: Dict[str, Dict[str, Any]] = {}
        self._write_count = 0

    @property
    def write_count(self) -> int:
        return self._write_count

    def write_board(self, board_id: str, document: Dict[str, Any]) -> StorageWriteResult:
        self._boards[board_id] = copy.deepcopy(document)
        self._write_count += 1
        return StorageWriteResult(success=True, key=board_id)

    def read_board(self, board_id: str) -> Result:
        document = self._boards.get(board_id)
        return Result.success(None if document is None else copy.deepcopy(document))

    def delete_board(self, board_id: str) -> bool:
        return self._boards.pop(board_id, None) is not None

    def list_boards(self) -> List[str]:
        return list(self._boards)

    def write_template(self, record: Dict[str, Any]) -> StorageWriteResult:
        self._templates[record["id"]] = copy.deepcopy(record)
        self._write_count += 1
        return StorageWriteResult(success=True, key=record["id"])

    def read_templates(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(r) for r in self._templates.values()]

    def delete_template(self, template_id: str) -> bool:
        return self._templates.pop(template_id, None) is not None


# =============================================================================
# FILE-BASED STORAGE BACKEND
# =============================================================================

_SAFE_NAME = re.compile(r"[^A-Za-z0-9_.-]")


class FileGraphStorage(GraphStorageBackend):
    """
    File-based backend.

    One `<board_id>.json` per board under `boards/`, and a single
    `templates.json` holding every saved template. Writes go to a
    temporary file that is then renamed over the target.
    """

    def __init__(self, storage_dir: str):
        self._storage_dir = storage_dir
        self._boards_dir = os.path.join(storage_dir, "boards")
        self._templates_file = os.path.join(storage_dir, "templates.json")
        os.makedirs(self._boards_dir, exist_ok=True)

    def _board_path(self, board_id: str) -> str:
        return os.path.join(self._boards_dir, _SAFE_NAME.sub("_", board_id) + ".json")

    def _write_json(self, path: str, payload: Any) -> None:
        tmp_path = path + ".tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, cls=GraphDocumentEncoder, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def write_board(self, board_id: str, document: Dict[str, Any]) -> StorageWriteResult:
        try:
            self._write_json(self._board_path(board_id), document)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write board %s: %s", board_id, e)
            return StorageWriteResult(
                success=False,
                key=board_id,
                error=Error(
                    code=ErrorCode.STORAGE_WRITE_FAILED,
                    message=f"Failed to write board: {e}",
                ).with_context("board_id", board_id),
            )
        return StorageWriteResult(success=True, key=board_id)

    def read_board(self, board_id: str) -> Result:
        path = self._board_path(board_id)
        if not os.path.exists(path):
            return Result.success(None)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return Result.success(json.load(f))
        except (OSError, ValueError) as e:
            return Result.failure(Error(
                code=ErrorCode.STORAGE_READ_FAILED,
                message=f"Failed to read board: {e}",
            ).with_context("board_id", board_id))

    def delete_board(self, board_id: str) -> bool:
        try:
            os.remove(self._board_path(board_id))
        except FileNotFoundError:
            return False
        return True

    def list_boards(self) -> List[str]:
        names = sorted(os.listdir(self._boards_dir))
        return [n[:-len(".json")] for n in names if n.endswith(".json")]

    def _load_templates(self) -> Dict[str, Dict[str, Any]]:
        if not os.path.exists(self._templates_file):
            return {}
        try:
            with open(self._templates_file, "r", encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable templates file %s: %s", self._templates_file, e)
            return {}
        if not isinstance(records, list):
            logger.warning("Ignoring templates file %s: expected a list", self._templates_file)
            return {}
        return {r["id"]: r for r in records if isinstance(r, dict) and "id" in r}

    def write_template(self, record: Dict[str, Any]) -> StorageWriteResult:
        records = self._load_templates()
        records[record["id"]] = record
        try:
            self._write_json(self._templates_file, list(records.values()))
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to write template %s: %s", record["id"], e)
            return StorageWriteResult(
                success=False,
                key=record["id"],
                error=Error(
                    code=ErrorCode.STORAGE_WRITE_FAILED,
                    message=f"Failed to write template: {e}",
                ),
            )
        return StorageWriteResult(success=True, key=record["id"])

    def read_templates(self) -> List[Dict[str, Any]]:
        return list(self._load_templates().values())

    def delete_template(self, template_id: str) -> bool:
        records = self._load_templates()
        if records.pop(template_id, None) is None:
            return False
        try:
            self._write_json(self._templates_file, list(records.values()))
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to delete template %s: %s", template_id, e)
            return False
        return True


def create_backend(config: Optional[StorageConfig] = None) -> GraphStorageBackend:
    """Create storage backend based on configuration."""
    config = config or StorageConfig()
    if config.backend_type == "file":
        return FileGraphStorage(config.storage_dir)
    return InMemoryGraphStorage()

__all__ = [
    'StorageWriteResult', 'GraphStorageBackend', 'InMemoryGraphStorage',
    'FileGraphStorage', 'create_backend', 'AutosaveScheduler',
    'GraphDocumentEncoder', 'DOCUMENT_FORMAT', 'DOCUMENT_VERSION',
    'encode_graph', 'decode_graph', 'dumps_graph', 'loads_graph',
]
