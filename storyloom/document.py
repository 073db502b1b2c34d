"""
Versioned story document and its reducer.

The host application owns exactly one StoryDocument at a time. Components
never modify it; they describe a change as an action, and `reduce` returns
the next document. A document that did not change is returned as-is, so
`new is old` tells the host nothing needs re-rendering.
"""

from dataclasses import dataclass, replace
from typing import Callable, Union

from storyloom import graph
from storyloom.models import Story, StoryNode, now_iso


@dataclass(frozen=True)
class StoryDocument:
    story: Story
    version: int = 0

    @property
    def nodes(self):
        return self.story.nodes


@dataclass(frozen=True)
class AddNode:
    node: StoryNode


@dataclass(frozen=True)
class UpdateNode:
    node: StoryNode


@dataclass(frozen=True)
class DeleteNode:
    node_id: str


@dataclass(frozen=True)
class MoveNode:
    node_id: str
    x: float
    y: float


@dataclass(frozen=True)
class UpdateDetails:
    title: str
    description: str


@dataclass(frozen=True)
class ReplaceStory:
    """Swap in a whole story (new, loaded or imported). Timestamps are kept."""
    story: Story


Action = Union[AddNode, UpdateNode, DeleteNode, MoveNode, UpdateDetails, ReplaceStory]


def new_document(story: Story = None) -> StoryDocument:
    return StoryDocument(story=story or Story.create())


def reduce(document: StoryDocument, action: Action, now: Callable[[], str] = now_iso) -> StoryDocument:
    """
    Apply an action to a document.

    Graph edits and detail edits bump the version and refresh updated_at.
    ReplaceStory bumps the version but keeps the incoming story untouched.
    """
    story = document.story

    if isinstance(action, ReplaceStory):
        return StoryDocument(story=action.story, version=document.version + 1)

    if isinstance(action, UpdateDetails):
        if action.title == story.title and action.description == story.description:
            return document
        changed = replace(story, title=action.title, description=action.description)
        return _commit(document, changed, now)

    if isinstance(action, AddNode):
        nodes = graph.add_node(story.nodes, action.node)
    elif isinstance(action, UpdateNode):
        nodes = graph.update_node(story.nodes, action.node)
    elif isinstance(action, DeleteNode):
        nodes = graph.delete_node(story.nodes, action.node_id)
    elif isinstance(action, MoveNode):
        nodes = graph.move_node(story.nodes, action.node_id, action.x, action.y)
    else:
        raise TypeError(f"Unknown action: {action!r}")

    if nodes == story.nodes:
        return document
    return _commit(document, replace(story, nodes=nodes), now)


def _commit(document: StoryDocument, story: Story, now: Callable[[], str]) -> StoryDocument:
    return StoryDocument(story=replace(story, updated_at=now()), version=document.version + 1)
