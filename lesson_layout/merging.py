"""Collapse lesson records that belong to one continuous lesson."""

from collections import defaultdict

from .logging import get_logger
from .models import NOTE_DELIMITER, ExamRef, Homework, LessonRecord, MergedBlock

logger = get_logger(__name__)

MERGE_MAX_BREAK_MINUTES = 5


def _block_order(block: LessonRecord) -> tuple:
    return (block.date, block.start_time, block.end_time, block.id)


def can_merge(current: LessonRecord, nxt: LessonRecord, max_break: int = MERGE_MAX_BREAK_MINUTES) -> bool:
    """
    Check whether ``nxt`` continues the lesson ``current``.

    Both must share the merge key (date, identifier and status) and ``nxt``
    must start no later than ``max_break`` minutes after ``current`` ends.
    Overlapping or touching records always qualify.
    """
    if current.merge_key != nxt.merge_key:
        return False
    return nxt.start_time - current.end_time <= max_break


def deduplicate_homework(homework1=(), homework2=()) -> tuple[Homework, ...]:
    """
    Deduplicate homework from two lessons, preserving completed status.

    Homework counts as identical when text, subject, due date and remark
    match; the surviving entry is completed if any duplicate was.
    """
    deduplicated: list[Homework] = []
    positions: dict[tuple, int] = {}

    for hw in (*homework1, *homework2):
        index = positions.get(hw.identity)
        if index is None:
            positions[hw.identity] = len(deduplicated)
            deduplicated.append(hw)
        elif hw.completed and not deduplicated[index].completed:
            deduplicated[index] = deduplicated[index].model_copy(update={'completed': True})

    return tuple(deduplicated)


def deduplicate_exams(exams1=(), exams2=()) -> tuple[ExamRef, ...]:
    """Deduplicate exams, keeping the first occurrence. Exams are never content-merged."""
    seen = set()
    deduplicated = []
    for exam in (*exams1, *exams2):
        if exam.identity not in seen:
            seen.add(exam.identity)
            deduplicated.append(exam)
    return tuple(deduplicated)


def combine_notes(first: str | None, second: str | None) -> str | None:
    """
    Combine two free-text note fields without repeating fragments.

    Previously merged notes are split on the delimiter again, so merging an
    already merged block yields the same text.

    Args:
        first: Notes of the earlier block
        second: Notes of the later block

    Returns:
        Pipe-joined distinct fragments, or None if both are empty
    """
    parts: list[str] = []
    seen: set[str] = set()
    for text in (first, second):
        if not text:
            continue
        for fragment in text.split('|'):
            fragment = fragment.strip()
            if fragment and fragment.lower() not in seen:
                seen.add(fragment.lower())
                parts.append(fragment)

    if not parts:
        return None
    return NOTE_DELIMITER.join(parts)


def merge_two(current: LessonRecord, nxt: LessonRecord) -> MergedBlock:
    """
    Merge two records into one block spanning both.

    The earlier block provides subject, teachers, rooms and status. The id
    becomes the lower of the two so render keys stay stable.
    """
    current = MergedBlock.from_record(current)
    nxt = MergedBlock.from_record(nxt)
    return current.model_copy(update={
        'id': min(current.id, nxt.id),
        'start_time': min(current.start_time, nxt.start_time),
        'end_time': max(current.end_time, nxt.end_time),
        'homework': deduplicate_homework(current.homework, nxt.homework),
        'exams': deduplicate_exams(current.exams, nxt.exams),
        'info': combine_notes(current.info, nxt.info),
        'notes': combine_notes(current.notes, nxt.notes),
        'source_ids': tuple(sorted(set(current.source_ids) | set(nxt.source_ids))),
    })


def merge_lessons(records, max_break: int = MERGE_MAX_BREAK_MINUTES) -> list[MergedBlock]:
    """
    Merge consecutive records of the same lesson into blocks.

    Algorithm:
    1. Bucket records by merge key (date, identifier, status)
    2. Sort each bucket by (start, end)
    3. Walk the bucket, extending the current block while the break to the
       next record is at most ``max_break`` minutes
    4. Sort all blocks by (date, start, end)

    Args:
        records: Lesson records, typically one day's worth
        max_break: Largest gap in minutes that still joins two records

    Returns:
        Merged blocks in chronological order
    """
    records = list(records)
    buckets: dict[tuple, list[LessonRecord]] = defaultdict(list)
    for record in records:
        buckets[record.merge_key].append(record)

    merged: list[MergedBlock] = []
    for bucket in buckets.values():
        bucket.sort(key=_block_order)

        current = MergedBlock.from_record(bucket[0])
        for nxt in bucket[1:]:
            if can_merge(current, nxt, max_break):
                current = merge_two(current, nxt)
            else:
                merged.append(current)
                current = MergedBlock.from_record(nxt)
        merged.append(current)

    merged.sort(key=_block_order)
    logger.debug("lessons_merged", records=len(records), blocks=len(merged))
    return merged
