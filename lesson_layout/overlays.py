"""Exam outlines drawn on top of the lessons that carry an exam."""

from .models import ExamOverlay, PlacedBlock
from .timeutils import clamp


def derive_exam_overlays(
    placed: list[PlacedBlock],
    day_start: int | None = None,
    day_end: int | None = None,
) -> list[ExamOverlay]:
    """
    Compute one overlay per exam referenced by the placed blocks.

    The carrying block with the smallest column index (earliest start on a
    tie) fixes the overlay's column; the exam's own times give its vertical
    span, since an exam can be shorter than the lesson it is written in.

    Args:
        placed: Output of the column assigner for one day
        day_start: Optional first minute of the day to clamp the exam span to
        day_end: Optional last minute of the day to clamp the exam span to

    Returns:
        Overlays ordered by start time, then exam id
    """
    anchors: dict[int, tuple] = {}
    for order, item in enumerate(placed):
        for exam in item.block.exams:
            rank = (item.column_index, item.start_time, order)
            if exam.exam_id not in anchors or rank < anchors[exam.exam_id][0]:
                anchors[exam.exam_id] = (rank, item, exam)

    overlays = []
    for exam_id, (_, item, exam) in anchors.items():
        start, end = exam.start_time, exam.end_time
        if day_start is not None and day_end is not None:
            start = clamp(start, day_start, day_end)
            end = max(start, clamp(end, day_start, day_end))
        overlays.append(ExamOverlay(
            exam_id=exam_id,
            start_time=start,
            end_time=end,
            column_index=item.column_index,
            column_count=item.column_count,
            cluster_id=item.cluster_id,
        ))

    overlays.sort(key=lambda o: (o.start_time, o.exam_id))
    return overlays


def visible_overlays(overlays, visible_columns: dict[int, int]) -> list[ExamOverlay]:
    """Drop overlays anchored in a column hidden in the current render pass."""
    return [
        overlay for overlay in overlays
        if overlay.column_index < visible_columns.get(overlay.cluster_id, overlay.column_count)
    ]
