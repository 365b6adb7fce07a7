"""
Template Instantiator
=====================

Expands a TemplateSpec into a subgraph: root -> sections -> leaves.

GUARANTEES:
===========
1. Node order is root, then each section followed by its leaves
2. Edge order matches node creation order (smoothstep, parent -> child)
3. Generated ids never collide with the ids passed in as taken
4. Positions follow a fixed grid; final placement is the caller's
   hierarchical layout pass

An unknown key is a logged failure Result, never an exception.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple
import logging

from ..config import TemplateConfig
from ..contracts.base import EdgeType, Error, ErrorCode, NodeType, Position, Result
from ..contracts.graph import Edge, Node
from ..contracts.payloads import TopicData
from ..core.ids import IdFactory
from .catalog import TemplateCatalog, TemplateSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeStyle:
    font_size: float
    color: str
    shape: str

    def payload(self, label: str) -> TopicData:
        return TopicData(
            label=label,
            font_size=self.font_size,
            color=self.color,
            shape=self.shape,
        )


ROOT_STYLE = NodeStyle(font_size=20, color="#f0f9ff", shape="rounded")
SECTION_STYLE = NodeStyle(font_size=16, color="#fef3c7", shape="rounded")
LEAF_STYLE = NodeStyle(font_size=14, color="#e5e7eb", shape="ellipse")


@dataclass(frozen=True)
class TemplateResult:
    """A generated subgraph, ready to be appended to a board."""
    template_key: str
    root_id: str
    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...]


def grid_positions(spec: TemplateSpec, config: TemplateConfig) -> List[Tuple[Position, List[Position]]]:
    """
    Pre-layout grid: one (section position, leaf positions) pair per section.

    Sections fill rows of `sections_per_row`; leaves stack in a column to
    the right of their section, centred on it.
    """
    placed = []
    for index, section in enumerate(spec.sections):
        row, col = divmod(index, config.sections_per_row)
        section_x = (col - 1) * config.section_spacing
        section_y = (row - 0.5) * config.section_spacing
        total_height = (len(section.children) - 1) * config.child_spacing
        start_y = section_y - total_height / 2
        leaves = [
            Position(section_x + config.child_offset_x, start_y + i * config.child_spacing)
            for i in range(len(section.children))
        ]
        placed.append((Position(section_x, section_y), leaves))
    return placed


class TemplateInstantiator:
    """Builds template subgraphs with fresh ids."""

    def __init__(
        self,
        ids: Optional[IdFactory] = None,
        config: Optional[TemplateConfig] = None,
        catalog: Optional[TemplateCatalog] = None,
    ):
        self._ids = ids or IdFactory()
        self._config = config or TemplateConfig()
        self._catalog = catalog or TemplateCatalog()

    @property
    def catalog(self) -> TemplateCatalog:
        return self._catalog

    def instantiate(
        self,
        key: str,
        taken_node_ids: Iterable[str] = (),
        taken_edge_ids: Iterable[str] = (),
    ) -> Result:
        """
        Expand the template registered under `key`.

        Returns Result.success(TemplateResult) or a failure carrying
        UNKNOWN_TEMPLATE.
        """
        spec = self._catalog.get(key)
        if spec is None:
            logger.warning("Unknown template key: %s", key)
            return Result.failure(Error(
                code=ErrorCode.UNKNOWN_TEMPLATE,
                message=f"No template registered under '{key}'",
            ).with_context("key", key))
        return Result.success(self.expand(spec, taken_node_ids, taken_edge_ids))

    def expand(
        self,
        spec: TemplateSpec,
        taken_node_ids: Iterable[str] = (),
        taken_edge_ids: Iterable[str] = (),
    ) -> TemplateResult:
        node_taken = set(taken_node_ids)
        edge_taken = set(taken_edge_ids)
        nodes: List[Node] = []
        edges: List[Edge] = []

        def new_node(position: Position, payload: TopicData) -> Node:
            node = Node(
                node_id=self._ids.node_id(taken=node_taken),
                position=position,
                node_type=NodeType.GENERIC,
                data=payload,
            )
            node_taken.add(node.node_id)
            nodes.append(node)
            return node

        def link(source: str, target: str) -> None:
            edge = Edge(
                edge_id=self._ids.edge_id(taken=edge_taken),
                source=source,
                target=target,
                edge_type=EdgeType.SMOOTHSTEP,
            )
            edge_taken.add(edge.edge_id)
            edges.append(edge)

        root = new_node(Position.origin(), ROOT_STYLE.payload(spec.root))
        grid = grid_positions(spec, self._config)
        for section, (section_pos, leaf_positions) in zip(spec.sections, grid):
            section_node = new_node(section_pos, SECTION_STYLE.payload(section.title))
            link(root.node_id, section_node.node_id)
            for label, leaf_pos in zip(section.children, leaf_positions):
                leaf = new_node(leaf_pos, LEAF_STYLE.payload(label))
                link(section_node.node_id, leaf.node_id)

        logger.debug("Expanded template %s: %d nodes", spec.key, len(nodes))
        return TemplateResult(
            template_key=spec.key,
            root_id=root.node_id,
            nodes=tuple(nodes),
            edges=tuple(edges),
        )
