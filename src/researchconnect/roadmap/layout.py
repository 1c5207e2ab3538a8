"""
Layout Module - Turn a generated roadmap into a positioned graph.
=================================================================

Nodes are grouped into levels by category (foundation, core, advanced,
specialization). Each non-empty level is a row; nodes in a row are centred
around x = 0. Edges follow each node's ``next_nodes`` and take the colour
of their source category.
"""

from dataclasses import dataclass, field
from typing import Optional

from researchconnect.shared.schemas import RoadmapNode, RoadmapStructure

LEVELS = ["foundation", "core", "advanced", "specialization"]
DEFAULT_CATEGORY = "foundation"

NODE_SPACING = 400
LEVEL_SPACING = 280

CATEGORY_COLORS = {
    "foundation": "#3b82f6",
    "core": "#10b981",
    "advanced": "#f97316",
    "specialization": "#a855f7",
}
DEFAULT_COLOR = "#94a3b8"

RESOURCE_ICONS = {
    "video": "🎥",
    "course": "🎓",
    "website": "🌐",
    "reading": "📚",
}


@dataclass
class PositionedNode:
    """A roadmap node with its canvas position."""

    node: RoadmapNode
    x: float
    y: float
    level: int

    @property
    def id(self) -> str:
        return self.node.id


@dataclass
class RoadmapEdge:
    source: str
    target: str
    color: str

    @property
    def id(self) -> str:
        return f"{self.source}-{self.target}"


@dataclass
class RoadmapLayout:
    nodes: list[PositionedNode] = field(default_factory=list)
    edges: list[RoadmapEdge] = field(default_factory=list)

    def get(self, node_id: str) -> Optional[PositionedNode]:
        for positioned in self.nodes:
            if positioned.id == node_id:
                return positioned
        return None


def node_category(node: RoadmapNode) -> str:
    """Lowercased category; a missing category counts as foundation."""
    return (node.category or "").lower() or DEFAULT_CATEGORY


def category_color(category: Optional[str]) -> str:
    return CATEGORY_COLORS.get((category or "").lower() or DEFAULT_CATEGORY, DEFAULT_COLOR)


def layout_roadmap(structure: RoadmapStructure) -> RoadmapLayout:
    """
    Position every node of a roadmap.

    Nodes whose category is not one of the known levels are not placed.
    Empty levels take no vertical space.
    """
    by_level: dict[str, list[RoadmapNode]] = {level: [] for level in LEVELS}
    for node in structure.nodes:
        category = node_category(node)
        if category in by_level:
            by_level[category].append(node)

    layout = RoadmapLayout()
    y = 0
    for level_index, level in enumerate(LEVELS):
        nodes = by_level[level]
        if not nodes:
            continue
        x_start = -(len(nodes) - 1) * (NODE_SPACING / 2)
        for i, node in enumerate(nodes):
            layout.nodes.append(
                PositionedNode(node=node, x=x_start + i * NODE_SPACING, y=y, level=level_index)
            )
        y += LEVEL_SPACING

    placed = {positioned.id for positioned in layout.nodes}
    for node in structure.nodes:
        color = category_color(node_category(node))
        for target in node.next_nodes:
            if target in placed:
                layout.edges.append(RoadmapEdge(source=node.id, target=target, color=color))

    return layout


def ordered_steps(structure: RoadmapStructure) -> list[RoadmapNode]:
    """The placed nodes in level order: the roadmap read top to bottom."""
    return [positioned.node for positioned in layout_roadmap(structure).nodes]


def resource_kind(resource: str) -> str:
    """
    Classify a resource string.

    Example:
        >>> resource_kind("MIT OpenCourseWare course 6.006")
        'course'
    """
    lower = resource.lower()
    if "youtube" in lower:
        return "video"
    if "course" in lower:
        return "course"
    if "website" in lower or "practice" in lower:
        return "website"
    return "reading"


def resource_icon(resource: str) -> str:
    return RESOURCE_ICONS[resource_kind(resource)]
