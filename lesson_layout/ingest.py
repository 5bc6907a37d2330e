"""Turn raw timetable payload entries into validated lesson records.

The timetable feed delivers lessons as loosely-typed dicts with HHMM times
(``740`` for 07:40), nested ``su``/``te``/``ro`` lists and an optional lesson
identifier stored under one of several keys. Everything here resolves those
quirks once, so the rest of the engine only sees ``LessonRecord`` values.
"""

from collections import defaultdict

from .errors import MalformedRecordError
from .logging import get_logger
from .models import (
    CompositeIdentifier,
    ExamRef,
    ExplicitIdentifier,
    Homework,
    LessonRecord,
    Person,
    StatusCode,
    composite_identifier,
)
from .timeutils import untis_to_minutes

logger = get_logger(__name__)

LESSON_IDENTIFIER_FIELDS = ('lsid', 'ls', 'lsNumber', 'lsnumber', 'lessonId', 'lessonID')


def extract_identifier(raw: dict) -> str | None:
    """Return the first usable upstream lesson identifier, if any."""
    for key in LESSON_IDENTIFIER_FIELDS:
        value = raw.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def parse_status(code) -> StatusCode:
    try:
        return StatusCode(code or StatusCode.NORMAL)
    except ValueError:
        # Unknown upstream codes render like regular lessons
        return StatusCode.NORMAL


def _subject_key(raw: dict) -> str:
    subjects = raw.get('su') or []
    if subjects and (subjects[0] or {}).get('name'):
        return subjects[0]['name']
    return raw.get('activityType') or ''


def _people(entries) -> tuple[Person, ...]:
    return tuple(
        Person(name=entry.get('name') or '', original_name=entry.get('orgname') or None)
        for entry in entries or []
    )


def _homework(entries) -> tuple[Homework, ...]:
    return tuple(
        Homework(
            text=entry.get('text') or '',
            subject_key=(entry.get('subject') or {}).get('name') or '',
            due_date=entry.get('date') or 0,
            remark=entry.get('remark'),
            completed=bool(entry.get('completed')),
        )
        for entry in entries or []
    )


def _exams(entries) -> tuple[ExamRef, ...]:
    return tuple(
        ExamRef(
            exam_id=entry['id'],
            name=entry.get('name') or '',
            subject_key=(entry.get('subject') or {}).get('name') or '',
            date=entry.get('date') or 0,
            start_time=untis_to_minutes(entry['startTime']),
            end_time=untis_to_minutes(entry['endTime']),
            text=entry.get('text'),
        )
        for entry in entries or []
    )


def resolve_identifier(raw: dict, subject_key: str, teachers, rooms, status) -> ExplicitIdentifier | CompositeIdentifier:
    explicit = extract_identifier(raw)
    if explicit is not None:
        return ExplicitIdentifier(value=explicit)
    return composite_identifier(subject_key, teachers, rooms, status)


def parse_lesson(raw: dict) -> LessonRecord:
    """
    Parse one raw timetable entry into a lesson record.

    Args:
        raw: Lesson dict as delivered by the timetable feed

    Returns:
        The validated lesson record

    Raises:
        MalformedRecordError: If the entry cannot form a valid lesson
    """
    try:
        subject_key = _subject_key(raw)
        teachers = _people(raw.get('te'))
        rooms = _people(raw.get('ro'))
        status = parse_status(raw.get('code'))
        return LessonRecord(
            id=raw['id'],
            date=raw.get('date') or 0,
            start_time=untis_to_minutes(raw['startTime']),
            end_time=untis_to_minutes(raw['endTime']),
            subject_key=subject_key,
            teachers=teachers,
            rooms=rooms,
            status=status,
            exams=_exams(raw.get('exams')),
            homework=_homework(raw.get('homework')),
            info=raw.get('info') or None,
            notes=raw.get('lstext') or None,
            identifier=resolve_identifier(raw, subject_key, teachers, rooms, status),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedRecordError(f"cannot parse lesson {raw.get('id')!r}: {exc}") from exc


def parse_lessons(raws) -> list[LessonRecord]:
    """
    Parse a list of raw entries, dropping the malformed ones.

    Zero-length or inverted lessons occasionally appear in the feed; they are
    skipped rather than failing the whole day.

    Args:
        raws: Iterable of raw lesson dicts

    Returns:
        Lesson records in input order
    """
    records = []
    for raw in raws or []:
        try:
            records.append(parse_lesson(raw))
        except MalformedRecordError as exc:
            logger.debug("lesson_dropped", reason=str(exc))
    return records


def group_by_day(records, keep_due_homework_only: bool = True) -> dict[int, list[LessonRecord]]:
    """
    Bucket lesson records by day.

    Args:
        records: Lesson records spanning any number of days
        keep_due_homework_only: Only keep homework due on the lesson's own day

    Returns:
        Mapping of yyyymmdd date to that day's records sorted by (start, end)
    """
    by_day = defaultdict(list)
    for record in records:
        if keep_due_homework_only and record.homework:
            due_today = tuple(hw for hw in record.homework if hw.due_date == record.date)
            if due_today != record.homework:
                record = record.model_copy(update={'homework': due_today})
        by_day[record.date].append(record)

    return {
        day: sorted(day_records, key=lambda r: (r.start_time, r.end_time))
        for day, day_records in sorted(by_day.items())
    }
