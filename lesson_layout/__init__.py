"""Lesson layout engine: merge a day's lessons and lay them out in columns."""

from .columns import assign_columns, cluster_items, lesson_priority, max_overlap
from .config import LayoutSettings, get_settings
from .errors import LayoutError, MalformedRecordError, ThresholdError
from .ingest import group_by_day, parse_lesson, parse_lessons
from .merging import (
    combine_notes,
    deduplicate_exams,
    deduplicate_homework,
    merge_lessons,
)
from .models import (
    AtomicSegment,
    CompositeIdentifier,
    ExamOverlay,
    ExamRef,
    ExplicitIdentifier,
    Homework,
    LessonRecord,
    MergedBlock,
    Person,
    PlacedBlock,
    Priority,
    StatusCode,
    VisibilityState,
)
from .overlays import derive_exam_overlays
from .pipeline import DayLayout, layout_day
from .segments import slice_segments, whole_segments
from .visibility import (
    FixedWidth,
    ViewportMode,
    VisibilityPolicy,
    WidthProvider,
    decide_visibility,
    policy_for,
)

__all__ = [
    'AtomicSegment',
    'CompositeIdentifier',
    'DayLayout',
    'ExamOverlay',
    'ExamRef',
    'ExplicitIdentifier',
    'FixedWidth',
    'Homework',
    'LayoutError',
    'LayoutSettings',
    'LessonRecord',
    'MalformedRecordError',
    'MergedBlock',
    'Person',
    'PlacedBlock',
    'Priority',
    'StatusCode',
    'ThresholdError',
    'ViewportMode',
    'VisibilityPolicy',
    'VisibilityState',
    'WidthProvider',
    'assign_columns',
    'cluster_items',
    'combine_notes',
    'decide_visibility',
    'deduplicate_exams',
    'deduplicate_homework',
    'derive_exam_overlays',
    'get_settings',
    'group_by_day',
    'layout_day',
    'lesson_priority',
    'max_overlap',
    'merge_lessons',
    'parse_lesson',
    'parse_lessons',
    'policy_for',
    'slice_segments',
    'whole_segments',
]
