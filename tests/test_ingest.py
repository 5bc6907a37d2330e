"""
Tests for parsing raw timetable entries.

- HHMM conversion and field mapping
- Identifier resolution
- Dropping malformed entries
- Grouping by day
"""

import pytest
import sys
import os

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from lesson_layout import (
    CompositeIdentifier,
    ExplicitIdentifier,
    LessonRecord,
    MalformedRecordError,
    StatusCode,
    group_by_day,
    merge_lessons,
    parse_lesson,
    parse_lessons,
)
from lesson_layout.timeutils import format_minutes, minutes_to_untis, untis_to_minutes
from factories import hm


def raw_lesson(**overrides):
    raw = {
        'id': 11,
        'date': 20251110,
        'startTime': 800,
        'endTime': 845,
        'su': [{'id': 1, 'name': 'MA'}],
        'te': [{'id': 1, 'name': 'SMI'}],
        'ro': [{'id': 1, 'name': 'R101'}],
    }
    raw.update(overrides)
    return raw


class TestTimeEncoding:
    """Test the HHMM helpers."""

    @pytest.mark.parametrize('hhmm, minutes', [(0, 0), (740, 460), (845, 525), (1715, 1035)])
    def test_untis_to_minutes(self, hhmm, minutes):
        """Test conversion of HHMM integers to minutes."""
        assert untis_to_minutes(hhmm) == minutes
        assert minutes_to_untis(minutes) == hhmm

    def test_format_minutes(self):
        """Test the HH:MM rendering used in logs."""
        assert format_minutes(460) == '07:40'


class TestParseLesson:
    """Test mapping of a single raw entry."""

    def test_basic_fields(self):
        """Test that times, subject, teachers and rooms are mapped."""
        record = parse_lesson(raw_lesson(info='Bring calculators', lstext='Chapter 3'))

        assert record.id == 11
        assert record.start_time == hm('08:00')
        assert record.end_time == hm('08:45')
        assert record.subject_key == 'MA'
        assert record.teachers[0].name == 'SMI'
        assert record.rooms[0].name == 'R101'
        assert record.status == StatusCode.NORMAL
        assert record.info == 'Bring calculators'
        assert record.notes == 'Chapter 3'

    def test_substitution_is_mapped(self):
        """Test that orgname marks a substitution."""
        record = parse_lesson(raw_lesson(te=[{'id': 2, 'name': 'JON', 'orgname': 'SMI'}]))

        assert record.teachers[0].is_substitution
        assert record.teachers[0].original_name == 'SMI'
        assert record.has_changes

    def test_activity_type_fallback(self):
        """Test that the activity type stands in for a missing subject."""
        record = parse_lesson(raw_lesson(su=[], activityType='Excursion'))

        assert record.subject_key == 'Excursion'

    def test_unknown_code_is_normal(self):
        """Test that an unknown status code renders as a normal lesson."""
        assert parse_lesson(raw_lesson(code='exam-week')).status == StatusCode.NORMAL

    def test_cancelled_code(self):
        """Test that the cancelled code is kept."""
        assert parse_lesson(raw_lesson(code='cancelled')).is_cancelled

    def test_exams_and_homework(self):
        """Test that nested exams and homework are converted."""
        record = parse_lesson(raw_lesson(
            exams=[{'id': 900, 'date': 20251110, 'startTime': 810, 'endTime': 840,
                    'name': 'Quiz', 'subject': {'id': 1, 'name': 'MA'}}],
            homework=[{'id': 1, 'lessonId': 11, 'date': 20251110, 'text': 'Exercise 4',
                       'subject': {'id': 1, 'name': 'MA'}, 'completed': True}],
        ))

        assert record.exams[0].exam_id == 900
        assert record.exams[0].start_time == hm('08:10')
        assert record.homework[0].completed is True
        assert record.homework[0].subject_key == 'MA'


class TestIdentifiers:
    """Test resolution of the merge identifier."""

    @pytest.mark.parametrize('field', ['lsid', 'ls', 'lsNumber', 'lsnumber', 'lessonId', 'lessonID'])
    def test_explicit_identifier_fields(self, field):
        """Test every field the feed may carry a lesson identifier in."""
        record = parse_lesson(raw_lesson(**{field: 4711}))

        assert record.identifier == ExplicitIdentifier(value='4711')

    def test_blank_identifier_falls_back_to_composite(self):
        """Test that a blank identifier string is ignored."""
        record = parse_lesson(raw_lesson(lsid='  '))

        assert isinstance(record.identifier, CompositeIdentifier)
        assert record.identifier.subject_key == 'MA'

    def test_composite_sorts_and_skips_blank_names(self):
        """Test that the composite signature is order independent."""
        record = parse_lesson(raw_lesson(te=[{'name': 'SMI'}, {'name': ''}, {'name': 'JON'}]))

        assert record.identifier.teachers == ('JON', 'SMI')

    def test_direct_construction_resolves_composite(self):
        """Test that a record built without identifier gets its composite."""
        record = LessonRecord(id=1, start_time=480, end_time=525, subject_key='EN')

        assert record.identifier == CompositeIdentifier(subject_key='EN')

    def test_shared_identifier_merges_across_room_change(self):
        """Test that parsed records with one identifier merge despite a new room."""
        records = parse_lessons([
            raw_lesson(id=1, lsid=77),
            raw_lesson(id=2, lsid=77, startTime=850, endTime=935, ro=[{'name': 'R102'}]),
        ])

        assert len(merge_lessons(records)) == 1


class TestMalformedRecords:
    """Test handling of entries that cannot form a lesson."""

    def test_zero_length_raises(self):
        """Test that parse_lesson rejects a zero-length lesson."""
        with pytest.raises(MalformedRecordError, match="end_time must be after start_time"):
            parse_lesson(raw_lesson(startTime=900, endTime=900))

    def test_missing_times_raise(self):
        """Test that parse_lesson rejects an entry without times."""
        raw = raw_lesson()
        del raw['endTime']

        with pytest.raises(MalformedRecordError):
            parse_lesson(raw)

    def test_malformed_entries_are_dropped(self):
        """Test that parse_lessons keeps only valid lessons."""
        records = parse_lessons([
            raw_lesson(id=1),
            raw_lesson(id=2, startTime=900, endTime=845),
            raw_lesson(id=3, startTime=1000, endTime=1000),
            raw_lesson(id=4, startTime=1000, endTime=1045),
        ])

        assert [r.id for r in records] == [1, 4]

    def test_direct_construction_rejects_inverted_times(self):
        """Test that an inverted lesson cannot be constructed."""
        with pytest.raises(ValueError, match="end_time must be after start_time"):
            LessonRecord(id=1, start_time=525, end_time=480)


class TestGroupByDay:
    """Test bucketing of a multi-day payload."""

    def test_records_grouped_and_sorted(self):
        """Test that each day's lessons come back sorted by time."""
        records = parse_lessons([
            raw_lesson(id=1, date=20251111, startTime=1000, endTime=1045),
            raw_lesson(id=2, date=20251110, startTime=1000, endTime=1045),
            raw_lesson(id=3, date=20251110, startTime=800, endTime=845),
        ])

        by_day = group_by_day(records)

        assert list(by_day) == [20251110, 20251111]
        assert [r.id for r in by_day[20251110]] == [3, 2]

    def test_homework_not_due_today_is_dropped(self):
        """Test that only homework due on the lesson's day is kept."""
        records = parse_lessons([raw_lesson(homework=[
            {'date': 20251110, 'text': 'Due today', 'subject': {'name': 'MA'}},
            {'date': 20251117, 'text': 'Due next week', 'subject': {'name': 'MA'}},
        ])])

        day = group_by_day(records)[20251110]

        assert [hw.text for hw in day[0].homework] == ['Due today']

    def test_homework_kept_when_asked(self):
        """Test that the homework filter can be disabled."""
        records = parse_lessons([raw_lesson(homework=[
            {'date': 20251117, 'text': 'Due next week', 'subject': {'name': 'MA'}},
        ])])

        day = group_by_day(records, keep_due_homework_only=False)[20251110]

        assert len(day[0].homework) == 1
