"""Value types shared by every stage of the layout engine."""

from enum import Enum, IntEnum
from typing import Annotated, Literal, Union

import pydantic
from pydantic import ConfigDict, Field

from .timeutils import MINUTES_PER_DAY

NOTE_DELIMITER = ' | '

# Names upstream uses when a substitution has no real teacher or room yet
PLACEHOLDER_NAMES = frozenset({'', '---', '?'})


class StatusCode(str, Enum):
    NORMAL = 'normal'
    CANCELLED = 'cancelled'
    IRREGULAR = 'irregular'


class Priority(IntEnum):
    """Column preference inside a cluster; lower values get the leftmost columns."""

    EXAM = 1
    GOOD_CHANGE = 2
    NORMAL = 3
    BAD_CHANGE = 4
    CANCELLED = 5


class Person(pydantic.BaseModel):
    """A teacher or room reference. ``original_name`` marks a substitution."""

    model_config = ConfigDict(frozen=True)

    name: str = ''
    original_name: str | None = None

    @property
    def is_substitution(self) -> bool:
        return bool(self.original_name)

    @property
    def has_resolvable_name(self) -> bool:
        return self.name.strip() not in PLACEHOLDER_NAMES


class Homework(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = ''
    subject_key: str = ''
    due_date: int = 0
    remark: str | None = None
    completed: bool = False

    @property
    def identity(self) -> tuple:
        return (self.text, self.subject_key, self.due_date, self.remark)


class ExamRef(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True)

    exam_id: int
    name: str = ''
    subject_key: str = ''
    date: int = 0
    start_time: int
    end_time: int
    text: str | None = None

    @property
    def identity(self) -> tuple:
        return (self.name, self.subject_key, self.date, self.start_time, self.end_time, self.text)


class ExplicitIdentifier(pydantic.BaseModel):
    """Lesson identifier supplied by the upstream feed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal['explicit'] = 'explicit'
    value: str


class CompositeIdentifier(pydantic.BaseModel):
    """Fallback signature for feeds without a lesson identifier."""

    model_config = ConfigDict(frozen=True)

    kind: Literal['composite'] = 'composite'
    subject_key: str = ''
    teachers: tuple[str, ...] = ()
    rooms: tuple[str, ...] = ()
    status: StatusCode = StatusCode.NORMAL


Identifier = Annotated[
    Union[ExplicitIdentifier, CompositeIdentifier],
    Field(discriminator='kind'),
]


def _entry_name(entry) -> str:
    if isinstance(entry, Person):
        return entry.name
    if isinstance(entry, dict):
        return entry.get('name') or ''
    return str(entry or '')


def composite_identifier(subject_key, teachers, rooms, status) -> CompositeIdentifier:
    """
    Build the composite signature for a lesson.

    Teacher and room names are sorted and blank names dropped, so the
    signature does not depend on the order the feed lists them in.
    """
    return CompositeIdentifier(
        subject_key=subject_key or '',
        teachers=tuple(sorted(n for n in map(_entry_name, teachers or ()) if n)),
        rooms=tuple(sorted(n for n in map(_entry_name, rooms or ()) if n)),
        status=status or StatusCode.NORMAL,
    )


class LessonRecord(pydantic.BaseModel):
    """One lesson of a single day, with times in minutes since midnight."""

    model_config = ConfigDict(frozen=True)

    id: int
    date: int = 0
    start_time: int
    end_time: int
    subject_key: str = ''
    teachers: tuple[Person, ...] = ()
    rooms: tuple[Person, ...] = ()
    status: StatusCode = StatusCode.NORMAL
    exams: tuple[ExamRef, ...] = ()
    homework: tuple[Homework, ...] = ()
    info: str | None = None
    notes: str | None = None
    identifier: Identifier

    @pydantic.model_validator(mode='before')
    @classmethod
    def resolve_identifier(cls, data):
        if isinstance(data, dict) and data.get('identifier') is None:
            data = dict(data)
            data['identifier'] = composite_identifier(
                data.get('subject_key'),
                data.get('teachers'),
                data.get('rooms'),
                data.get('status'),
            )
        return data

    @pydantic.model_validator(mode='after')
    def validate_time_order(self) -> 'LessonRecord':
        if self.end_time <= self.start_time:
            raise ValueError('end_time must be after start_time')
        if self.start_time < 0 or self.end_time > MINUTES_PER_DAY:
            raise ValueError('lesson times must lie within a single day')
        return self

    @property
    def merge_key(self) -> tuple:
        # Status is part of the key so a half-cancelled double lesson stays split
        return (self.date, self.identifier, self.status)

    @property
    def has_exam(self) -> bool:
        return bool(self.exams)

    @property
    def is_cancelled(self) -> bool:
        return self.status == StatusCode.CANCELLED

    @property
    def has_changes(self) -> bool:
        if self.status == StatusCode.IRREGULAR:
            return True
        return any(p.is_substitution for p in self.teachers + self.rooms)


class MergedBlock(LessonRecord):
    """A logical lesson built from one or more records of the same lesson."""

    source_ids: tuple[int, ...] = ()

    @pydantic.model_validator(mode='before')
    @classmethod
    def default_source_ids(cls, data):
        if isinstance(data, dict) and not data.get('source_ids'):
            data = dict(data)
            data['source_ids'] = (data.get('id'),)
        return data

    @classmethod
    def from_record(cls, record: LessonRecord) -> 'MergedBlock':
        if isinstance(record, MergedBlock):
            return record
        return cls(**dict(record))


class AtomicSegment(pydantic.BaseModel):
    """A slice of one block between two consecutive cut points of the day."""

    model_config = ConfigDict(frozen=True)

    block: LessonRecord
    start_time: int
    end_time: int

    @pydantic.model_validator(mode='after')
    def validate_time_order(self) -> 'AtomicSegment':
        if self.end_time <= self.start_time:
            raise ValueError('end_time must be after start_time')
        return self

    @property
    def key(self) -> str:
        return f"{self.block.id}-{self.start_time}"


class PlacedBlock(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True)

    block: LessonRecord
    start_time: int
    end_time: int
    column_index: int
    column_count: int
    cluster_id: int
    priority: Priority = Priority.NORMAL
    key: str = ''

    @pydantic.model_validator(mode='after')
    def validate_column(self) -> 'PlacedBlock':
        if not 0 <= self.column_index < self.column_count:
            raise ValueError('column_index must lie within column_count')
        return self

    def overlaps(self, other: 'PlacedBlock') -> bool:
        return self.start_time < other.end_time and other.start_time < self.end_time


class VisibilityState(pydantic.BaseModel):
    """Visibility decision for one render pass; threaded by the caller."""

    model_config = ConfigDict(frozen=True)

    collapsed: bool = False
    visible_columns: int = 1

    @pydantic.field_validator('visible_columns')
    @classmethod
    def validate_visible_columns(cls, v: int) -> int:
        if v < 1:
            raise ValueError('visible_columns must be at least 1')
        return v


class ExamOverlay(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True)

    exam_id: int
    start_time: int
    end_time: int
    column_index: int
    column_count: int
    cluster_id: int
