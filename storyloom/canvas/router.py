"""
Connection router for the story canvas.

Computes one smooth directed path per (scene, choice) pair whose target
scene exists. Paths leave the source card's right edge, one anchor per
choice row, and enter the target card's left edge. Both control points sit
on the vertical line halfway between the two anchors, which gives an S-curve
that is horizontal at both ends.

Choices whose target does not resolve produce no path. That missing line is
how a dangling choice shows up on the canvas.

The structure is held in a NetworkX MultiDiGraph (one edge per choice, keyed
by choice id) so that several choices between the same two scenes each keep
their own path.
"""

from dataclasses import dataclass
from typing import List, Sequence

import networkx as nx

from storyloom.canvas.constants import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    CHOICE_SPACING,
    CONNECTION_COLOR,
    CONNECTION_WIDTH,
    NODE_WIDTH,
    SOURCE_ANCHOR_Y,
    TARGET_ANCHOR_Y,
)
from storyloom.models import Position, StoryNode

ARROW_MARKER_ID = "arrowhead"


@dataclass(frozen=True)
class Connection:
    source_id: str
    choice_id: str
    target_id: str
    choice_index: int
    start: Position
    end: Position

    @property
    def mid_x(self) -> float:
        return (self.start.x + self.end.x) / 2

    @property
    def control_1(self) -> Position:
        return Position(self.mid_x, self.start.y)

    @property
    def control_2(self) -> Position:
        return Position(self.mid_x, self.end.y)

    def svg_path(self) -> str:
        s, e, c1, c2 = self.start, self.end, self.control_1, self.control_2
        return (f"M {_fmt(s.x)} {_fmt(s.y)} "
                f"C {_fmt(c1.x)} {_fmt(c1.y)}, {_fmt(c2.x)} {_fmt(c2.y)}, {_fmt(e.x)} {_fmt(e.y)}")


def _fmt(value: float) -> str:
    # 150.0 -> "150", 12.5 -> "12.5"
    return f"{value:g}"


def source_anchor(node: StoryNode, choice_index: int) -> Position:
    return Position(node.position.x + NODE_WIDTH,
                    node.position.y + SOURCE_ANCHOR_Y + choice_index * CHOICE_SPACING)


def target_anchor(node: StoryNode) -> Position:
    return Position(node.position.x, node.position.y + TARGET_ANCHOR_Y)


def build_choice_graph(nodes: Sequence[StoryNode]) -> nx.MultiDiGraph:
    """
    Build a MultiDiGraph of scenes and resolvable choices.

    Node attributes: scene (StoryNode). Edge attributes: choice, index.
    Edges are only added when the target scene exists.
    """
    G = nx.MultiDiGraph()
    for node in nodes:
        G.add_node(node.id, scene=node)
    for node in nodes:
        for index, choice in enumerate(node.choices):
            if choice.is_resolved and choice.target_node_id in G:
                G.add_edge(node.id, choice.target_node_id, key=choice.id, choice=choice, index=index)
    return G


def route_connections(nodes: Sequence[StoryNode]) -> List[Connection]:
    """
    Compute the paths for every resolvable choice.

    Order follows the node list, then the choice index within each node;
    this only decides which path is drawn on top.
    """
    G = build_choice_graph(nodes)
    connections = []
    for node in nodes:
        edges = sorted(G.out_edges(node.id, keys=True, data=True), key=lambda e: e[3]["index"])
        for _, target_id, choice_id, data in edges:
            target = G.nodes[target_id]["scene"]
            connections.append(Connection(
                source_id=node.id,
                choice_id=choice_id,
                target_id=target_id,
                choice_index=data["index"],
                start=source_anchor(node, data["index"]),
                end=target_anchor(target),
            ))
    return connections


def render_svg(nodes: Sequence[StoryNode], width: int = CANVAS_WIDTH, height: int = CANVAS_HEIGHT) -> str:
    """SVG markup for the connection layer, drawn underneath the node cards."""
    paths = "\n".join(
        f'<path d="{c.svg_path()}" fill="none" stroke="{CONNECTION_COLOR}" '
        f'stroke-width="{CONNECTION_WIDTH}" marker-end="url(#{ARROW_MARKER_ID})" '
        f'data-source="{c.source_id}" data-choice="{c.choice_id}" />'
        for c in route_connections(nodes)
    )
    return f'''<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}"
     style="position: absolute; top: 0; left: 0; pointer-events: none;">
    <defs>
        <marker id="{ARROW_MARKER_ID}" markerWidth="10" markerHeight="10" refX="9" refY="3" orient="auto">
            <polygon points="0 0, 10 3, 0 6" fill="{CONNECTION_COLOR}" />
        </marker>
    </defs>
    {paths}
</svg>'''
