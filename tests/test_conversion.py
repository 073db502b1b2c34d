"""
Tests for story import / export.
"""

import json

import pytest

from storyloom.conversion import export_filename, export_story_json, import_story_json
from storyloom.errors import UserInputError
from storyloom.models import Choice, Position, Story, StoryNode


@pytest.fixture
def story():
    return Story(
        id="story-1",
        title="The  Haunted\tHouse",
        description="Spooky",
        nodes=(
            StoryNode(id="n1", title="Door", content="Knock?", is_start=True, position=Position(100, 100),
                      choices=(Choice(id="c1", text="Knock", target_node_id="n2"),)),
            StoryNode(id="n2", title="Hall", is_end=True, position=Position(450, 120)),
        ),
        created_at="2026-01-01T00:00:00Z",
        updated_at="2026-01-02T00:00:00Z",
    )


class TestExport:

    def test_export_is_camel_case_json(self, story):
        data = json.loads(export_story_json(story))
        assert data["createdAt"] == "2026-01-01T00:00:00Z"
        assert data["nodes"][0]["isStart"] is True
        assert data["nodes"][0]["choices"][0]["targetNodeId"] == "n2"

    def test_round_trip(self, story):
        assert import_story_json(export_story_json(story)) == story

    def test_filename_collapses_whitespace(self, story):
        assert export_filename(story) == "The_Haunted_House.json"

    def test_filename_for_empty_title(self, story):
        from dataclasses import replace
        assert export_filename(replace(story, title="")) == "story.json"


class TestImport:

    def test_accepts_bytes(self, story):
        assert import_story_json(export_story_json(story).encode("utf-8")).id == "story-1"

    @pytest.mark.parametrize("payload", [
        "not json",
        "[1, 2, 3]",
        '"just a string"',
        '{"title": "no id"}',
        '{"id": "s", "nodes": [{"title": "node without id"}]}',
        b"\xff\xfe\x00",
    ])
    def test_malformed_raises_user_input_error(self, payload):
        with pytest.raises(UserInputError) as exc_info:
            import_story_json(payload)
        assert exc_info.value.message == "Failed to import story. Please check the file format."
