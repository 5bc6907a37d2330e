"""Builders for lesson records used across the test modules."""

from lesson_layout import ExamRef, LessonRecord, Person, StatusCode

DAY = 20251110


def hm(text: str) -> int:
    """Convert 'HH:MM' to minutes since midnight."""
    hours, minutes = text.split(':')
    return int(hours) * 60 + int(minutes)


def person(name, original_name=None) -> Person:
    if isinstance(name, Person):
        return name
    return Person(name=name, original_name=original_name)


def lesson(
    id=1,
    start='08:00',
    end='08:45',
    subject='MA',
    teachers=('SMI',),
    rooms=('R101',),
    status=StatusCode.NORMAL,
    date=DAY,
    **extra,
) -> LessonRecord:
    return LessonRecord(
        id=id,
        date=date,
        start_time=hm(start),
        end_time=hm(end),
        subject_key=subject,
        teachers=tuple(person(t) for t in teachers),
        rooms=tuple(person(r) for r in rooms),
        status=status,
        **extra,
    )


def exam(exam_id=900, start='09:00', end='09:45', name='Quiz', subject='MA', date=DAY) -> ExamRef:
    return ExamRef(
        exam_id=exam_id,
        name=name,
        subject_key=subject,
        date=date,
        start_time=hm(start),
        end_time=hm(end),
    )
