"""Sweep-line decomposition of a day's blocks into atomic segments."""

from .models import AtomicSegment, LessonRecord
from .timeutils import clamp


def clamped_span(block: LessonRecord, day_start: int, day_end: int) -> tuple[int, int]:
    start = clamp(block.start_time, day_start, day_end)
    end = max(start, clamp(block.end_time, day_start, day_end))
    return start, end


def cut_points(blocks, day_start: int, day_end: int) -> list[int]:
    """Return every distinct block boundary inside the day, plus the day bounds."""
    cuts = {day_start, day_end}
    for block in blocks:
        cuts.update(clamped_span(block, day_start, day_end))
    return sorted(cuts)


def slice_segments(blocks, day_start: int, day_end: int) -> list[AtomicSegment]:
    """
    Split blocks into atomic segments at every block boundary of the day.

    Partially overlapping lessons then share whole segments, so a narrow
    layout can show each lesson's sliver next to the others. Blocks that end
    up empty after clamping to the day window are skipped.

    Args:
        blocks: Merged blocks of one day
        day_start: First minute of the rendered day
        day_end: Last minute of the rendered day

    Returns:
        Segments grouped per block, each block's segments in time order
    """
    blocks = list(blocks)
    cuts = cut_points(blocks, day_start, day_end)
    segments = []

    for block in blocks:
        start, end = clamped_span(block, day_start, day_end)
        if start >= end:
            continue
        for t1, t2 in zip(cuts, cuts[1:]):
            if t1 >= start and t2 <= end:
                segments.append(AtomicSegment(block=block, start_time=t1, end_time=t2))

    return segments


def whole_segments(blocks, day_start: int, day_end: int) -> list[AtomicSegment]:
    """One segment per block covering its whole span, clamped to the day."""
    segments = []
    for block in blocks:
        start, end = clamped_span(block, day_start, day_end)
        if start < end:
            segments.append(AtomicSegment(block=block, start_time=start, end_time=end))
    return segments
