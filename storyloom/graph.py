"""
Story graph operations.

Every function takes a node sequence and returns a new tuple of nodes; the
input is never modified and nothing here raises. An id that does not exist
is treated as a no-op, since the editor UI is the only source of ids.
"""

from dataclasses import replace
from typing import Iterable, Optional, Sequence, Tuple

from storyloom.models import Position, StoryNode, new_id

Nodes = Tuple[StoryNode, ...]

DEFAULT_SCENE_TITLE = "New Scene"
DEFAULT_SCENE_CONTENT = "Enter your story text here..."
FIRST_SCENE_TITLE = "Opening Scene"
FIRST_SCENE_CONTENT = "Your story begins here..."

# Where new scenes land when the caller has no viewport centre to offer
DEFAULT_CENTER = Position(400.0, 200.0)
# Successive new scenes are staggered by this much, wrapping every CASCADE_WRAP
CASCADE_STEP = 30.0
CASCADE_WRAP = 8


def find_node(nodes: Iterable[StoryNode], node_id: str) -> Optional[StoryNode]:
    for node in nodes:
        if node.id == node_id:
            return node
    return None


def start_nodes(nodes: Iterable[StoryNode]) -> Nodes:
    """All nodes flagged as start, in list order. Zero or several are allowed."""
    return tuple(n for n in nodes if n.is_start)


def add_node(nodes: Sequence[StoryNode], new_node: StoryNode) -> Nodes:
    """Append a node. The caller assigns its id, position and start flag."""
    return tuple(nodes) + (new_node,)


def update_node(nodes: Sequence[StoryNode], updated_node: StoryNode) -> Nodes:
    """Replace the node with the same id. Unknown ids leave the graph unchanged."""
    return tuple(updated_node if n.id == updated_node.id else n for n in nodes)


def delete_node(nodes: Sequence[StoryNode], node_id: str) -> Nodes:
    """
    Remove a node and every choice pointing at it.

    The choice cleanup happens in the same pass as the removal, so the
    returned graph never references node_id.
    """
    result = []
    for node in nodes:
        if node.id == node_id:
            continue
        kept = tuple(c for c in node.choices if c.target_node_id != node_id)
        if len(kept) != len(node.choices):
            node = replace(node, choices=kept)
        result.append(node)
    return tuple(result)


def move_node(nodes: Sequence[StoryNode], node_id: str, x: float, y: float) -> Nodes:
    """Set a node's position. No clamping, no collision avoidance."""
    return tuple(n.with_position(x, y) if n.id == node_id else n for n in nodes)


def default_position(nodes: Sequence[StoryNode], center: Optional[Position] = None) -> Position:
    """
    Pick a position for a freshly added scene.

    Scenes cascade down and to the right of the viewport centre so that
    several quick additions do not land exactly on top of each other.
    """
    origin = center or DEFAULT_CENTER
    step = (len(nodes) % CASCADE_WRAP) * CASCADE_STEP
    return origin.offset(step, step)


def new_scene(
    nodes: Sequence[StoryNode],
    position: Optional[Position] = None,
    title: str = DEFAULT_SCENE_TITLE,
    content: str = DEFAULT_SCENE_CONTENT,
) -> StoryNode:
    """
    Build a new scene ready for add_node.

    The first scene of a story is flagged as start; later ones never are.
    """
    return StoryNode(
        id=new_id("node"),
        title=title,
        content=content,
        position=position or default_position(nodes),
        is_start=len(nodes) == 0,
    )


def first_scene(position: Optional[Position] = None) -> StoryNode:
    """The opening scene offered by the empty-story screen."""
    return new_scene((), position=position or DEFAULT_CENTER,
                     title=FIRST_SCENE_TITLE, content=FIRST_SCENE_CONTENT)
