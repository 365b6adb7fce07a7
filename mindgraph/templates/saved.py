"""
Saved Templates
===============

User boards stored as reusable templates.

A saved template is a full graph document plus a name and creation
time. Applying one replaces the whole board; edges stored without a
type come back as labeled edges.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional
import logging
import time

from ..contracts.base import EdgeType, Error, ErrorCode, Result
from ..contracts.graph import Graph
from ..core.ids import IdFactory
from ..storage.serialization import decode_graph, encode_graph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedTemplate:
    template_id: str
    name: str
    document: Dict[str, Any] = field(default_factory=dict, hash=False)
    created_at: int = 0  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.template_id,
            "name": self.name,
            "data": self.document,
            "createdAt": self.created_at,
        }

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> SavedTemplate:
        return SavedTemplate(
            template_id=raw["id"],
            name=raw.get("name", ""),
            document=raw.get("data") or {},
            created_at=int(raw.get("createdAt", 0)),
        )


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class SavedTemplateLibrary:
    """
    CRUD over saved templates in a storage backend.

    `backend` is any GraphStorageBackend.
    """

    def __init__(
        self,
        backend,
        ids: Optional[IdFactory] = None,
        clock: Callable[[], int] = _now_ms,
    ):
        self._backend = backend
        self._ids = ids or IdFactory()
        self._clock = clock

    def save(self, name: str, graph: Graph) -> Result:
        """Store `graph` under `name`. Result[SavedTemplate]."""
        name = name.strip()
        if not name:
            raise ValueError("Template name must not be blank")
        taken = {t.template_id for t in self.list()}
        template = SavedTemplate(
            template_id=self._ids.template_id(taken=taken),
            name=name,
            document=encode_graph(graph),
            created_at=self._clock(),
        )
        written = self._backend.write_template(template.to_dict())
        if not written.success:
            return Result.failure(written.error)
        logger.info("Saved template %s (%s)", template.template_id, name)
        return Result.success(template)

    def list(self) -> List[SavedTemplate]:
        """Newest first."""
        templates = []
        for raw in self._backend.read_templates():
            try:
                templates.append(SavedTemplate.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable saved template: %s", e)
        templates.sort(key=lambda t: t.created_at, reverse=True)
        return templates

    def get(self, template_id: str) -> Optional[SavedTemplate]:
        for template in self.list():
            if template.template_id == template_id:
                return template
        return None

    def rename(self, template_id: str, name: str) -> Optional[SavedTemplate]:
        template = self.get(template_id)
        name = name.strip()
        if template is None or not name:
            return None
        renamed = replace(template, name=name)
        self._backend.write_template(renamed.to_dict())
        return renamed

    def delete(self, template_id: str) -> bool:
        return self._backend.delete_template(template_id)

    def load_graph(self, template_id: str) -> Result:
        """
        Result[Graph] for a saved template.

        Untyped edges decode as labeled. A malformed document is a
        logged failure; the caller keeps its current board.
        """
        template = self.get(template_id)
        if template is None:
            return Result.failure(Error(
                code=ErrorCode.UNKNOWN_TEMPLATE,
                message=f"No saved template '{template_id}'",
            ))
        result = decode_graph(template.document, default_edge_type=EdgeType.LABELED)
        if result.is_failure:
            logger.warning(
                "Discarding saved template %s: %s", template_id, result.error.message,
            )
        return result
