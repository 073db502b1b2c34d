"""
Story repository.

Key layout in the key-value store:

    story:{user_id}:{story_id}   full story document
    story-list:{user_id}         list of StoryMeta dicts, one per saved story

Saves are last-write-wins. The list entry is rewritten from the story on
every save, so nodeCount and the timestamps always match the stored body.
"""

import logging
from typing import List, Optional

from storyloom.models import Story, StoryMeta
from storyloom.storage.protocol import KeyValueStore

logger = logging.getLogger(__name__)


def story_key(user_id: str, story_id: str) -> str:
    return f"story:{user_id}:{story_id}"


def story_list_key(user_id: str) -> str:
    return f"story-list:{user_id}"


class StoryRepository:
    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def save(self, user_id: str, story: Story) -> StoryMeta:
        """Store the story and upsert its list entry."""
        self.kv.set(story_key(user_id, story.id), story.to_dict())

        meta = StoryMeta.from_story(story)
        entries = self._load_list(user_id)
        for i, entry in enumerate(entries):
            if entry.get("id") == story.id:
                entries[i] = meta.to_dict()
                break
        else:
            entries.append(meta.to_dict())
        self.kv.set(story_list_key(user_id), entries)

        logger.info(f"Saved story {story.id} for user {user_id} ({meta.node_count} scenes)")
        return meta

    def list(self, user_id: str) -> List[StoryMeta]:
        return [StoryMeta.from_dict(entry) for entry in self._load_list(user_id)]

    def get(self, user_id: str, story_id: str) -> Optional[Story]:
        data = self.kv.get(story_key(user_id, story_id))
        if data is None:
            return None
        return Story.from_dict(data)

    def delete(self, user_id: str, story_id: str) -> None:
        """Remove the story and its list entry. Missing stories are ignored."""
        self.kv.delete(story_key(user_id, story_id))
        entries = [e for e in self._load_list(user_id) if e.get("id") != story_id]
        self.kv.set(story_list_key(user_id), entries)
        logger.info(f"Deleted story {story_id} for user {user_id}")

    def _load_list(self, user_id: str) -> list:
        return list(self.kv.get(story_list_key(user_id)) or [])
