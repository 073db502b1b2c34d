"""
Story graph entities.

A story is a flat list of scenes (StoryNode). Each scene owns an ordered
list of choices, and every choice names the scene it leads to by id.

All entities are frozen dataclasses: a change to the graph always builds a
new value (see storyloom.graph and storyloom.document). Sequences are stored
as tuples so snapshots can be shared safely between the canvas, the node
editor and the preview.

JSON documents use camelCase keys, the shape stored by the persistence service:

{
  "id": "story-...",
  "title": "The Cave",
  "description": "",
  "nodes": [
    {
      "id": "node-...",
      "title": "Entrance",
      "content": "...",
      "choices": [{"id": "choice-...", "text": "Go in", "targetNodeId": "node-..."}],
      "position": {"x": 100, "y": 100},
      "isStart": true,
      "isEnd": false
    }
  ],
  "createdAt": "2026-01-14T12:00:00Z",
  "updatedAt": "2026-01-14T12:00:00Z"
}
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0

    def offset(self, dx: float, dy: float) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Position":
        data = data or {}
        return cls(x=data.get("x", 0.0), y=data.get("y", 0.0))


@dataclass(frozen=True)
class Choice:
    """
    A labeled edge out of a scene.

    target_node_id is "" while the author has not picked a destination. It is
    never checked against the node set here; dangling targets are tolerated
    until playback or delete cleanup.
    """
    id: str
    text: str = ""
    target_node_id: str = ""

    @property
    def is_resolved(self) -> bool:
        return bool(self.target_node_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "targetNodeId": self.target_node_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Choice":
        return cls(
            id=data["id"],
            text=data.get("text", ""),
            target_node_id=data.get("targetNodeId") or "",
        )


@dataclass(frozen=True)
class StoryNode:
    """
    A single scene.

    Invariants (enforced by callers, not here):
    - ids are unique within a story
    - choice ids are unique within the node
    - is_end implies no choices; the node editor enforces this on save
    """
    id: str
    title: str = ""
    content: str = ""
    choices: Tuple[Choice, ...] = ()
    position: Position = field(default_factory=Position)
    is_start: bool = False
    is_end: bool = False

    def with_position(self, x: float, y: float) -> "StoryNode":
        return replace(self, position=Position(x, y))

    def find_choice(self, choice_id: str) -> Optional[Choice]:
        for choice in self.choices:
            if choice.id == choice_id:
                return choice
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "choices": [c.to_dict() for c in self.choices],
            "position": self.position.to_dict(),
            "isStart": self.is_start,
            "isEnd": self.is_end,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoryNode":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            content=data.get("content", ""),
            choices=tuple(Choice.from_dict(c) for c in data.get("choices") or []),
            position=Position.from_dict(data.get("position")),
            is_start=bool(data.get("isStart", False)),
            is_end=bool(data.get("isEnd", False)),
        )


@dataclass(frozen=True)
class Story:
    id: str
    title: str = "Untitled Story"
    description: str = ""
    nodes: Tuple[StoryNode, ...] = ()
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def create(cls, title: str = "Untitled Story", description: str = "") -> "Story":
        """Create an empty story with a fresh id and both timestamps set to now."""
        ts = now_iso()
        return cls(
            id=new_id("story"),
            title=title,
            description=description,
            created_at=ts,
            updated_at=ts,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "nodes": [n.to_dict() for n in self.nodes],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Story":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            description=data.get("description", ""),
            nodes=tuple(StoryNode.from_dict(n) for n in data.get("nodes") or []),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )


@dataclass(frozen=True)
class StoryMeta:
    """List-view projection of a saved story (no node bodies)."""
    id: str
    title: str = ""
    description: str = ""
    created_at: str = ""
    updated_at: str = ""
    node_count: int = 0

    @classmethod
    def from_story(cls, story: Story) -> "StoryMeta":
        return cls(
            id=story.id,
            title=story.title,
            description=story.description,
            created_at=story.created_at,
            updated_at=story.updated_at,
            node_count=len(story.nodes),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "nodeCount": self.node_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoryMeta":
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            description=data.get("description", ""),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
            node_count=int(data.get("nodeCount", 0)),
        )
