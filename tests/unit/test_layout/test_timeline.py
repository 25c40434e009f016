"""Tests for timeline construction."""

from datetime import timedelta

from flowtrace.layout import ProcessedState, TimelineEntryKind, build_timeline
from flowtrace.recorder import Action, ActionKind
from tests.helpers.captures import make_state
from tests.helpers.time import FIXED_NOW


def _action(
    action_id: str,
    sequence_number: int,
    before: str | None,
    offset_seconds: int = 0,
) -> Action:
    return Action(
        id=action_id,
        session_id="session-1",
        sequence_number=sequence_number,
        captured_at=FIXED_NOW + timedelta(seconds=offset_seconds),
        kind=ActionKind.CLICK,
        state_before_id=before,
    )


def _ids(timeline: list) -> list[str]:
    return [
        entry.state.state.id if entry.state is not None else entry.action.id
        for entry in timeline
    ]


class TestBuildTimeline:
    """Tests for build_timeline."""

    def test_actions_follow_their_state(self) -> None:
        """Each state is followed by the actions taken from it."""
        states = [make_state("s2", 2), make_state("s1", 1)]
        actions = [
            _action("a2", 2, "s1"),
            _action("a1", 1, "s1"),
            _action("a3", 3, "s2"),
        ]
        timeline = build_timeline(states, actions)

        assert _ids(timeline) == ["s1", "a1", "a2", "s2", "a3"]
        assert [entry.kind for entry in timeline] == [
            TimelineEntryKind.STATE,
            TimelineEntryKind.ACTION,
            TimelineEntryKind.ACTION,
            TimelineEntryKind.STATE,
            TimelineEntryKind.ACTION,
        ]

    def test_orphans_last_by_time(self) -> None:
        """Actions without a known state come last in time order."""
        states = [make_state("s1", 1)]
        actions = [
            _action("late", 2, None, offset_seconds=9),
            _action("early", 1, None, offset_seconds=1),
            _action("lost", 3, "missing", offset_seconds=5),
        ]
        timeline = build_timeline(states, actions)

        assert _ids(timeline) == ["s1", "early", "lost", "late"]

    def test_first_flags(self) -> None:
        """The first state and location anchors are flagged."""
        states = [
            ProcessedState(state=make_state("s1", 1)),
            ProcessedState(state=make_state("s2", 2)),
            ProcessedState(state=make_state("s3", 3), is_first_of_location=True),
        ]
        timeline = build_timeline(states, [])

        assert [entry.is_first for entry in timeline] == [True, False, True]
        assert [entry.sequence_number for entry in timeline] == [1, 2, 3]

    def test_empty(self) -> None:
        """Nothing recorded gives an empty timeline."""
        assert build_timeline([], []) == []
