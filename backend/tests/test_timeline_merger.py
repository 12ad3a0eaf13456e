"""
Tests for merge_timeline().

Verifies:
- Output is sorted ascending by date
- Ties keep insertion order (deadlines before events)
- Inputs are not modified
"""
from datetime import datetime, timezone
from uuid import uuid4

from app.services.timeline_items import DeadlineItem, EventItem, TimelineItemKind
from app.services.timeline_merger import merge_timeline


def deadline_item(day, title="Deadline", hour=0):
    return DeadlineItem(
        id=uuid4(),
        kind=TimelineItemKind.DEADLINE,
        date=datetime(2024, 3, day, hour, tzinfo=timezone.utc),
        status="upcoming",
        priority="high",
        days_left=1,
        title=title,
        description=None,
    )


def event_item(day, title="Event", hour=0):
    return EventItem(
        id=uuid4(),
        kind=TimelineItemKind.EVENT,
        date=datetime(2024, 3, day, hour, tzinfo=timezone.utc),
        status="upcoming",
        priority="medium",
        days_left=1,
        title=title,
        description=None,
    )


def test_items_are_sorted_by_date():
    deadlines = [deadline_item(20, "D20"), deadline_item(5, "D5")]
    events = [event_item(12, "E12"), event_item(1, "E1")]
    
    merged = merge_timeline(deadlines, events)
    
    assert [item.title for item in merged] == ["E1", "D5", "E12", "D20"]


def test_ties_keep_deadlines_before_events():
    """A deadline and an event at the same instant keep insertion order."""
    deadline = deadline_item(10, "Deadline")
    event = event_item(10, "Event")
    
    merged = merge_timeline([deadline], [event])
    
    assert [item.title for item in merged] == ["Deadline", "Event"]


def test_ties_within_one_source_keep_source_order():
    first = event_item(10, "First")
    second = event_item(10, "Second")
    
    merged = merge_timeline([], [first, second])
    
    assert merged == [first, second]


def test_merge_is_idempotent():
    deadlines = [deadline_item(20), deadline_item(3, hour=6)]
    events = [event_item(3, hour=6), event_item(9)]
    
    once = merge_timeline(deadlines, events)
    twice = merge_timeline([i for i in once if isinstance(i, DeadlineItem)], [i for i in once if isinstance(i, EventItem)])
    
    assert once == twice


def test_inputs_are_not_modified():
    deadlines = [deadline_item(20), deadline_item(5)]
    snapshot = list(deadlines)
    
    merge_timeline(deadlines, [])
    
    assert deadlines == snapshot


def test_empty_inputs():
    assert merge_timeline([], []) == []
    assert merge_timeline(None, None) == []
