"""
Story import / export.

Stories are exchanged as a single JSON document with the same shape the
persistence service stores (see storyloom.models). Import does not validate
the schema beyond what is needed to build the entities; anything unreadable
becomes a UserInputError with one generic message.
"""

import json
import logging
import re
from typing import Union

from storyloom.errors import UserInputError
from storyloom.models import Story

logger = logging.getLogger(__name__)


def export_story_json(story: Story) -> str:
    """Full export of the story as a pretty-printed JSON string."""
    return json.dumps(story.to_dict(), indent=2, ensure_ascii=False)


def export_filename(story: Story) -> str:
    """File name for a download: whitespace runs in the title become underscores."""
    stem = re.sub(r"\s+", "_", story.title or "")
    return f"{stem or 'story'}.json"


def import_story_json(data: Union[str, bytes]) -> Story:
    """
    Parse an uploaded story document.

    Raises:
        UserInputError: the file is not JSON or not a story-shaped object
    """
    try:
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        document = json.loads(data)
        if not isinstance(document, dict):
            raise TypeError(f"expected a JSON object, got {type(document).__name__}")
        return Story.from_dict(document)
    except (UnicodeDecodeError, ValueError, TypeError, KeyError, AttributeError) as e:
        logger.warning(f"Story import failed: {e}")
        raise UserInputError() from e
