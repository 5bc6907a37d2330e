"""Cluster overlapping lessons and assign each one a column."""

from typing import NamedTuple

from .logging import get_logger
from .models import AtomicSegment, LessonRecord, PlacedBlock, Priority

logger = get_logger(__name__)


class _Item(NamedTuple):
    block: LessonRecord
    start: int
    end: int
    key: str

    @property
    def duration(self) -> int:
        return self.end - self.start


def _as_item(item) -> _Item:
    if isinstance(item, AtomicSegment):
        return _Item(item.block, item.start_time, item.end_time, item.key)
    return _Item(item, item.start_time, item.end_time, str(item.id))


def lesson_priority(block: LessonRecord) -> Priority:
    """
    Rank a lesson for the left-to-right column order inside a cluster.

    1. Exam
    2. Substitution with a real teacher or room, or irregular lesson
    3. Normal
    4. Substitution to a placeholder (blank, ``---`` or ``?``)
    5. Cancelled
    """
    if block.has_exam:
        return Priority.EXAM
    if block.is_cancelled:
        return Priority.CANCELLED
    if not block.has_changes:
        return Priority.NORMAL

    changed = [p for p in block.teachers + block.rooms if p.is_substitution]
    if any(p.has_resolvable_name for p in changed):
        return Priority.GOOD_CHANGE
    if changed:
        return Priority.BAD_CHANGE
    # Irregular without a substitution
    return Priority.GOOD_CHANGE


def cluster_items(items) -> list[list]:
    """
    Split items into clusters of transitively overlapping time spans.

    Items are swept in (start, end) order; an item opens a new cluster when
    it starts at or after the latest end seen in the current cluster.
    """
    ordered = sorted(items, key=lambda i: _as_item(i)[1:3])
    clusters = []
    current = []
    current_max_end = None

    for item in ordered:
        span = _as_item(item)
        if current and span.start < current_max_end:
            current.append(item)
            current_max_end = max(current_max_end, span.end)
        else:
            if current:
                clusters.append(current)
            current = [item]
            current_max_end = span.end

    if current:
        clusters.append(current)
    return clusters


def max_overlap(items) -> int:
    """Largest number of items active at the same instant."""
    events = []
    for item in items:
        span = _as_item(item)
        events.append((span.start, 1))
        events.append((span.end, -1))
    # Ends sort before starts at the same minute, so touching spans do not count
    events.sort()

    depth = best = 0
    for _, delta in events:
        depth += delta
        best = max(best, depth)
    return best


def _fits(column: list[_Item], item: _Item) -> bool:
    return all(item.end <= other.start or item.start >= other.end for other in column)


def _first_fit(ranked) -> list[tuple]:
    columns: list[list[_Item]] = []
    placement = []
    for priority, item in ranked:
        for index, column in enumerate(columns):
            if _fits(column, item):
                column.append(item)
                placement.append((priority, item, index))
                break
        else:
            columns.append([item])
            placement.append((priority, item, len(columns) - 1))
    return placement


def _place_cluster(cluster, cluster_id: int) -> list[PlacedBlock]:
    ranked = [(lesson_priority(i.block), i) for i in map(_as_item, cluster)]
    ranked.sort(key=lambda r: (r[0], r[1].start, r[1].duration, r[1].block.id))
    placement = _first_fit(ranked)

    column_count = 1 + max(index for _, _, index in placement)
    depth = max_overlap(cluster)
    if column_count > depth:
        # Start order never needs more than `depth` columns
        logger.debug("cluster_repacked", cluster_id=cluster_id, columns=column_count, depth=depth)
        ranked.sort(key=lambda r: (r[1].start, r[0], r[1].duration, r[1].block.id))
        placement = _first_fit(ranked)
        column_count = depth

    return [
        PlacedBlock(
            block=item.block,
            start_time=item.start,
            end_time=item.end,
            column_index=index,
            column_count=column_count,
            cluster_id=cluster_id,
            priority=priority,
            key=item.key,
        )
        for priority, item, index in placement
    ]


def assign_columns(items) -> list[PlacedBlock]:
    """
    Assign every block or segment a column within its overlap cluster.

    Algorithm:
    1. Cluster items by transitive time overlap
    2. Order each cluster by priority, then start time, then duration
       (shorter first, so a single lesson is not hidden behind a double one)
    3. Place each item in the first column it does not overlap, opening a
       new column when none fits; a cluster that ends up wider than its
       deepest overlap is re-placed in start order (priority breaks ties)

    Args:
        items: Merged blocks or atomic segments of one day

    Returns:
        Placed items, cluster by cluster in time order, each cluster in
        placement order
    """
    placed = []
    clusters = cluster_items(items)
    for cluster_id, cluster in enumerate(clusters):
        placed.extend(_place_cluster(cluster, cluster_id))

    logger.debug("columns_assigned", items=len(placed), clusters=len(clusters))
    return placed
