"""
Node editing session.

Holds a working copy of one scene while its editor dialog is open. Nothing
reaches the story until `commit()` builds the replacement node; closing the
dialog without committing simply drops the session.
"""

from dataclasses import replace
from typing import List, Sequence, Tuple

from storyloom.models import Choice, StoryNode, new_id

DEFAULT_CHOICE_TEXT = "New choice"


class NodeEditSession:
    """
    Working copy of a scene's editable fields.

    Args:
        node: the committed scene being edited
        all_nodes: the story's scenes, used to offer choice targets
    """

    def __init__(self, node: StoryNode, all_nodes: Sequence[StoryNode]):
        self.original = node
        self._all_nodes = tuple(all_nodes)
        self.title = node.title
        self.content = node.content
        self.is_start = node.is_start
        self.is_end = node.is_end
        self._choices: List[Choice] = list(node.choices)

    @property
    def node_id(self) -> str:
        return self.original.id

    @property
    def choices(self) -> Tuple[Choice, ...]:
        return tuple(self._choices)

    @property
    def available_targets(self) -> Tuple[StoryNode, ...]:
        """Scenes a choice may lead to. The edited scene itself is excluded."""
        return tuple(n for n in self._all_nodes if n.id != self.node_id)

    @property
    def discards_choices(self) -> bool:
        """True when saving now would drop choices because the scene is an ending."""
        return self.is_end and bool(self._choices)

    @property
    def is_dirty(self) -> bool:
        return self.commit() != self.original

    def add_choice(self, text: str = DEFAULT_CHOICE_TEXT) -> Choice:
        taken = {c.id for c in self._choices}
        choice_id = new_id("choice")
        while choice_id in taken:
            choice_id = new_id("choice")
        choice = Choice(id=choice_id, text=text, target_node_id="")
        self._choices.append(choice)
        return choice

    def remove_choice(self, choice_id: str) -> None:
        self._choices = [c for c in self._choices if c.id != choice_id]

    def set_choice_text(self, choice_id: str, text: str) -> None:
        self._choices = [replace(c, text=text) if c.id == choice_id else c for c in self._choices]

    def retarget_choice(self, choice_id: str, target_node_id: str) -> bool:
        """
        Point a choice at another scene.

        Returns False (and changes nothing) for the edited scene itself or an
        id that is not one of the story's scenes.
        """
        if target_node_id not in {n.id for n in self.available_targets}:
            return False
        if not any(c.id == choice_id for c in self._choices):
            return False
        self._choices = [replace(c, target_node_id=target_node_id) if c.id == choice_id else c
                         for c in self._choices]
        return True

    def commit(self) -> StoryNode:
        """Build the replacement scene. Ending scenes always commit with no choices."""
        return replace(
            self.original,
            title=self.title,
            content=self.content,
            choices=() if self.is_end else tuple(self._choices),
            is_start=self.is_start,
            is_end=self.is_end,
        )
