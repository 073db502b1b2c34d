"""
Tests for story playback.
"""

import pytest

from storyloom.models import Choice, StoryNode
from storyloom.preview import (
    PlaybackState,
    PlaybackStatus,
    PreviewEngine,
    advance,
    available_choices,
    initialize,
    restart,
    status,
)


@pytest.fixture
def story_nodes():
    """
    start --left--> cave (end)
          --right-> forest --back--> start
          --broken-> (missing)
    forest2 is a dead end
    """
    return (
        StoryNode(id="start", title="Crossroads", is_start=True, choices=(
            Choice(id="left", text="Go left", target_node_id="cave"),
            Choice(id="right", text="Go right", target_node_id="forest"),
            Choice(id="broken", text="Nowhere", target_node_id="missing"),
            Choice(id="unset", text="Unset"),
        )),
        StoryNode(id="cave", title="Cave", is_end=True),
        StoryNode(id="forest", title="Forest", choices=(
            Choice(id="back", text="Go back", target_node_id="start"),
            Choice(id="deeper", text="Deeper", target_node_id="forest2"),
        )),
        StoryNode(id="forest2", title="Deep forest"),
    )


class TestPlaybackFunctions:

    def test_initialize_at_start(self, story_nodes):
        state = initialize(story_nodes)
        assert state == PlaybackState(current_node_id="start", history=("start",))
        assert status(state, story_nodes) == PlaybackStatus.PLAYING

    def test_no_start(self):
        nodes = (StoryNode(id="a"),)
        state = initialize(nodes)
        assert state.current_node_id is None
        assert status(state, nodes) == PlaybackStatus.NO_START
        assert available_choices(state, nodes) == ()

    def test_first_start_wins(self):
        nodes = (StoryNode(id="a"), StoryNode(id="b", is_start=True), StoryNode(id="c", is_start=True))
        assert initialize(nodes).current_node_id == "b"

    def test_unresolvable_choices_hidden(self, story_nodes):
        state = initialize(story_nodes)
        assert [c.id for c in available_choices(state, story_nodes)] == ["left", "right"]

    def test_advance_appends_history(self, story_nodes):
        state = initialize(story_nodes)
        right = story_nodes[0].choices[1]
        state = advance(state, story_nodes, right)
        assert state.current_node_id == "forest"
        assert state.history == ("start", "forest")

    def test_advance_on_dangling_choice_is_noop(self, story_nodes):
        state = initialize(story_nodes)
        broken = story_nodes[0].choices[2]
        assert advance(state, story_nodes, broken) is state

    def test_advance_with_foreign_choice_is_noop(self, story_nodes):
        state = initialize(story_nodes)
        foreign = Choice(id="back", text="Go back", target_node_id="start")
        assert advance(state, story_nodes, foreign) is state

    def test_advance_follows_stored_target_not_stale_copy(self, story_nodes):
        state = initialize(story_nodes)
        right = story_nodes[0].choices[1]
        stale = Choice(id=right.id, text=right.text, target_node_id=story_nodes[0].choices[0].target_node_id)
        state = advance(state, story_nodes, stale)
        assert state.current_node_id == "forest"

    def test_advance_with_stale_copy_of_dangling_choice_is_noop(self, story_nodes):
        state = initialize(story_nodes)
        broken = story_nodes[0].choices[2]
        stale = Choice(id=broken.id, text=broken.text, target_node_id="forest")
        assert advance(state, story_nodes, stale) is state

    def test_ending(self, story_nodes):
        state = advance(initialize(story_nodes), story_nodes, story_nodes[0].choices[0])
        assert status(state, story_nodes) == PlaybackStatus.ENDED
        assert available_choices(state, story_nodes) == ()

    def test_dead_end(self, story_nodes):
        state = PlaybackState(current_node_id="forest2", history=("start", "forest", "forest2"))
        assert status(state, story_nodes) == PlaybackStatus.DEAD_END

    def test_cycles_grow_history(self, story_nodes):
        state = initialize(story_nodes)
        for _ in range(3):
            state = advance(state, story_nodes, story_nodes[0].choices[1])
            state = advance(state, story_nodes, story_nodes[2].choices[0])
        assert len(state.history) == 7
        assert state.current_node_id == "start"

    def test_restart(self, story_nodes):
        state = advance(initialize(story_nodes), story_nodes, story_nodes[0].choices[1])
        assert restart(story_nodes) == initialize(story_nodes)
        assert state.history != restart(story_nodes).history

    def test_end_node_with_stale_choices_offers_nothing(self):
        nodes = (
            StoryNode(id="a", is_start=True, is_end=True,
                      choices=(Choice(id="x", text="x", target_node_id="b"),)),
            StoryNode(id="b"),
        )
        state = initialize(nodes)
        assert status(state, nodes) == PlaybackStatus.ENDED
        assert available_choices(state, nodes) == ()
        assert advance(state, nodes, nodes[0].choices[0]) is state


class TestPreviewEngine:

    def test_walkthrough(self, story_nodes):
        engine = PreviewEngine(story_nodes)
        assert engine.step == 1
        assert engine.current_node.title == "Crossroads"

        assert engine.choose("right") is True
        assert engine.current_node.id == "forest"
        assert engine.step == 2

        assert engine.choose("deeper") is True
        assert engine.status == PlaybackStatus.DEAD_END

        engine.restart()
        assert engine.history == ("start",)

    def test_choose_unknown_or_dangling(self, story_nodes):
        engine = PreviewEngine(story_nodes)
        assert engine.choose("nope") is False
        assert engine.choose("broken") is False
        assert engine.history == ("start",)

    def test_load_restarts(self, story_nodes):
        engine = PreviewEngine(story_nodes)
        engine.choose("right")
        engine.load((StoryNode(id="solo", is_start=True, is_end=True),))
        assert engine.current_node.id == "solo"
        assert engine.status == PlaybackStatus.ENDED

    def test_empty_story(self):
        engine = PreviewEngine()
        assert engine.status == PlaybackStatus.NO_START
        assert engine.step == 0
        assert engine.current_node is None
