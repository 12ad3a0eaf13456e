"""
Timeline merging.

Merges normalized deadline and event items into one chronological list.
"""
from typing import List, Sequence

from app.services.timeline_items import TimelineItem


def merge_timeline(
    deadline_items: Sequence[TimelineItem],
    event_items: Sequence[TimelineItem],
) -> List[TimelineItem]:
    """
    Concatenate deadlines then events and sort ascending by date.
    
    The sort is stable: items sharing an instant keep their insertion
    order (deadlines before events, each in source order). Pure; the
    inputs are not modified.
    """
    merged: List[TimelineItem] = []
    merged.extend(deadline_items or ())
    merged.extend(event_items or ())
    merged.sort(key=lambda item: item.date)
    return merged
