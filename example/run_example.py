#!/usr/bin/env python3
"""
Simple example demonstrating the lesson layout engine.
Lays out one school day at a wide and a narrow width.
"""

import json
import os
import sys

# Add parent directory to path so we can import lesson_layout
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lesson_layout import LayoutSettings, ViewportMode, layout_day, parse_lessons
from lesson_layout.logging import setup_logging
from lesson_layout.timeutils import format_minutes


RAW_LESSONS = [
    # A double maths lesson the feed splits into two records
    {'id': 11, 'date': 20251110, 'startTime': 800, 'endTime': 845,
     'su': [{'id': 1, 'name': 'MA'}], 'te': [{'id': 1, 'name': 'SMI'}], 'ro': [{'id': 1, 'name': 'R101'}]},
    {'id': 12, 'date': 20251110, 'startTime': 850, 'endTime': 935,
     'su': [{'id': 1, 'name': 'MA'}], 'te': [{'id': 1, 'name': 'SMI'}], 'ro': [{'id': 1, 'name': 'R101'}],
     'info': 'Bring calculators'},
    # Three parallel courses, one with an exam, one cancelled
    {'id': 21, 'date': 20251110, 'startTime': 955, 'endTime': 1040,
     'su': [{'id': 2, 'name': 'EN'}], 'te': [{'id': 2, 'name': 'JON'}], 'ro': [{'id': 2, 'name': 'R202'}]},
    {'id': 22, 'date': 20251110, 'startTime': 955, 'endTime': 1040,
     'su': [{'id': 3, 'name': 'FR'}], 'te': [{'id': 3, 'name': 'DUP'}], 'ro': [{'id': 3, 'name': 'R203'}],
     'code': 'cancelled'},
    {'id': 23, 'date': 20251110, 'startTime': 955, 'endTime': 1040,
     'su': [{'id': 4, 'name': 'CH'}], 'te': [{'id': 4, 'name': 'CUR'}], 'ro': [{'id': 4, 'name': 'LAB1'}],
     'exams': [{'id': 900, 'date': 20251110, 'startTime': 1000, 'endTime': 1030, 'name': 'Quiz',
                'subject': {'id': 4, 'name': 'CH'}}]},
    # Zero-length artifact from the feed, dropped during ingestion
    {'id': 31, 'date': 20251110, 'startTime': 1200, 'endTime': 1200,
     'su': [{'id': 5, 'name': 'PE'}]},
]


def describe(layout):
    return {
        'collapsed': layout.state.collapsed,
        'placed': [
            {
                'key': p.key,
                'subject': p.block.subject_key,
                'span': f"{format_minutes(p.start_time)}-{format_minutes(p.end_time)}",
                'column': f"{p.column_index + 1}/{p.column_count}",
                'visible': layout.is_visible(p),
            }
            for p in layout.placed
        ],
        'exams': [
            {
                'exam_id': o.exam_id,
                'span': f"{format_minutes(o.start_time)}-{format_minutes(o.end_time)}",
                'column': o.column_index,
            }
            for o in layout.visible_overlays
        ],
    }


def main():
    settings = LayoutSettings()
    setup_logging(json_output=settings.log_json, log_level=settings.log_level)

    records = parse_lessons(RAW_LESSONS)
    print(f"Parsed {len(records)} of {len(RAW_LESSONS)} lessons")

    wide = layout_day(records, width=320, mode=ViewportMode.WIDE, settings=settings)
    print("Wide layout:")
    print(json.dumps(describe(wide), indent=2))

    # Narrowing below the collapse threshold keeps only the highest priority column
    narrow = layout_day(records, width=150, mode=ViewportMode.CONSTRAINED,
                        previous_state=wide.state, settings=settings)
    print("Narrow layout:")
    print(json.dumps(describe(narrow), indent=2))


if __name__ == '__main__':
    main()
