"""
Traversal engine for story preview.

Walks the scene graph from the start scene following the reader's choices.
The engine only reads the graph; its own state is a small immutable
PlaybackState (current scene + the path taken so far).

Nothing here raises. A graph without a start scene gives NO_START, a
choice that does not lead anywhere is ignored, and a non-ending scene with
no choices is reported as DEAD_END so the reader view can tell it apart
from a proper ending.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from storyloom.graph import find_node, start_nodes
from storyloom.models import Choice, StoryNode


class PlaybackStatus(Enum):
    NO_START = "no_start"
    PLAYING = "playing"
    ENDED = "ended"
    DEAD_END = "dead_end"


@dataclass(frozen=True)
class PlaybackState:
    current_node_id: Optional[str] = None
    history: Tuple[str, ...] = ()


def find_start(nodes: Sequence[StoryNode]) -> Optional[StoryNode]:
    """First scene flagged as start, by list order. Others are ignored."""
    starts = start_nodes(nodes)
    return starts[0] if starts else None


def initialize(nodes: Sequence[StoryNode]) -> PlaybackState:
    start = find_start(nodes)
    if start is None:
        return PlaybackState()
    return PlaybackState(current_node_id=start.id, history=(start.id,))


def restart(nodes: Sequence[StoryNode]) -> PlaybackState:
    return initialize(nodes)


def current_node(state: PlaybackState, nodes: Sequence[StoryNode]) -> Optional[StoryNode]:
    if state.current_node_id is None:
        return None
    return find_node(nodes, state.current_node_id)


def status(state: PlaybackState, nodes: Sequence[StoryNode]) -> PlaybackStatus:
    node = current_node(state, nodes)
    if node is None:
        return PlaybackStatus.NO_START
    if node.is_end:
        return PlaybackStatus.ENDED
    if not node.choices:
        return PlaybackStatus.DEAD_END
    return PlaybackStatus.PLAYING


def available_choices(state: PlaybackState, nodes: Sequence[StoryNode]) -> Tuple[Choice, ...]:
    """
    Choices the reader may pick.

    An ending scene offers nothing even if it still carries choices. Choices
    whose target scene is missing are left out.
    """
    node = current_node(state, nodes)
    if node is None or node.is_end:
        return ()
    return tuple(c for c in node.choices
                 if c.is_resolved and find_node(nodes, c.target_node_id) is not None)


def advance(state: PlaybackState, nodes: Sequence[StoryNode], choice: Choice) -> PlaybackState:
    """
    Follow a choice of the current scene.

    The choice must belong to the current scene and lead to an existing
    scene; anything else returns the state unchanged. The target is read
    from the scene's own copy of the choice.
    """
    node = current_node(state, nodes)
    if node is None or node.is_end:
        return state
    stored = node.find_choice(choice.id)
    if stored is None or not stored.is_resolved:
        return state
    target = find_node(nodes, stored.target_node_id)
    if target is None:
        return state
    return PlaybackState(current_node_id=target.id, history=state.history + (target.id,))


class PreviewEngine:
    """Stateful wrapper used by the reader view."""

    def __init__(self, nodes: Sequence[StoryNode] = ()):
        self._nodes: Tuple[StoryNode, ...] = tuple(nodes)
        self._state = initialize(self._nodes)

    def load(self, nodes: Sequence[StoryNode]) -> None:
        """Take a new version of the graph and start over."""
        self._nodes = tuple(nodes)
        self._state = initialize(self._nodes)

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_node(self) -> Optional[StoryNode]:
        return current_node(self._state, self._nodes)

    @property
    def history(self) -> Tuple[str, ...]:
        return self._state.history

    @property
    def step(self) -> int:
        """1-based position in the journey; 0 when there is no start scene."""
        return len(self._state.history)

    @property
    def status(self) -> PlaybackStatus:
        return status(self._state, self._nodes)

    @property
    def choices(self) -> Tuple[Choice, ...]:
        return available_choices(self._state, self._nodes)

    def choose(self, choice_id: str) -> bool:
        """Follow the current scene's choice with this id. Returns True if playback moved."""
        node = self.current_node
        choice = node.find_choice(choice_id) if node else None
        if choice is None:
            return False
        new_state = advance(self._state, self._nodes, choice)
        moved = new_state is not self._state
        self._state = new_state
        return moved

    def restart(self) -> None:
        self._state = restart(self._nodes)
