"""
Tests for the segment slicer.

- Cut points from block boundaries and the day window
- Reconstruction of every block from its segments
- Clamping to the day window
"""

import sys
import os

# Add parent directory to path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from lesson_layout import merge_lessons, slice_segments, whole_segments
from lesson_layout.segments import cut_points
from factories import hm, lesson

DAY_START = hm('07:40')
DAY_END = hm('17:15')


def segments_of(segments, block):
    return sorted((s for s in segments if s.block.id == block.id), key=lambda s: s.start_time)


class TestSlicing:
    """Test the sweep-line decomposition."""

    def test_single_block_is_one_segment(self):
        """Test that a lone block yields exactly its own span."""
        blocks = merge_lessons([lesson(id=1, start='08:00', end='08:45')])

        segments = slice_segments(blocks, DAY_START, DAY_END)

        assert [(s.start_time, s.end_time) for s in segments] == [(hm('08:00'), hm('08:45'))]

    def test_partial_overlap_is_cut_at_every_boundary(self):
        """Test that 08:00-09:30 and 08:45-10:00 are split at 08:45 and 09:30."""
        blocks = merge_lessons([
            lesson(id=1, start='08:00', end='09:30', subject='MA'),
            lesson(id=2, start='08:45', end='10:00', subject='EN'),
        ])

        segments = slice_segments(blocks, DAY_START, DAY_END)

        first = segments_of(segments, blocks[0])
        second = segments_of(segments, blocks[1])
        assert [(s.start_time, s.end_time) for s in first] == [
            (hm('08:00'), hm('08:45')),
            (hm('08:45'), hm('09:30')),
        ]
        assert [(s.start_time, s.end_time) for s in second] == [
            (hm('08:45'), hm('09:30')),
            (hm('09:30'), hm('10:00')),
        ]

    def test_segments_reconstruct_each_block(self):
        """Test that every block's segments cover its span without gap or overlap."""
        blocks = merge_lessons([
            lesson(id=1, start='08:00', end='09:35', subject='MA'),
            lesson(id=2, start='08:20', end='08:50', subject='EN'),
            lesson(id=3, start='09:00', end='11:00', subject='FR'),
            lesson(id=4, start='10:15', end='10:30', subject='CH'),
            lesson(id=5, start='12:00', end='12:45', subject='PE'),
        ])

        segments = slice_segments(blocks, DAY_START, DAY_END)

        for block in blocks:
            own = segments_of(segments, block)
            assert own[0].start_time == block.start_time
            assert own[-1].end_time == block.end_time
            for left, right in zip(own, own[1:]):
                assert left.end_time == right.start_time

    def test_segment_keys_are_unique(self):
        """Test that render keys distinguish segments of one block."""
        blocks = merge_lessons([
            lesson(id=1, start='08:00', end='10:00', subject='MA'),
            lesson(id=2, start='09:00', end='09:45', subject='EN'),
        ])

        segments = slice_segments(blocks, DAY_START, DAY_END)
        keys = [s.key for s in segments]

        assert len(keys) == len(set(keys))
        assert '1-480' in keys


class TestDayWindow:
    """Test clamping of blocks to the rendered day."""

    def test_block_is_clamped_to_day_window(self):
        """Test that a block starting before the day window is cut at its start."""
        blocks = merge_lessons([lesson(id=1, start='07:00', end='08:30')])

        segments = slice_segments(blocks, DAY_START, DAY_END)

        assert [(s.start_time, s.end_time) for s in segments] == [(DAY_START, hm('08:30'))]

    def test_block_outside_window_is_skipped(self):
        """Test that a block entirely after the day window yields no segment."""
        blocks = merge_lessons([lesson(id=1, start='18:00', end='18:45')])

        assert slice_segments(blocks, DAY_START, DAY_END) == []
        assert whole_segments(blocks, DAY_START, DAY_END) == []

    def test_cut_points_include_day_bounds(self):
        """Test that the day bounds are always cut points."""
        blocks = merge_lessons([lesson(id=1, start='08:00', end='08:45')])

        assert cut_points(blocks, DAY_START, DAY_END) == [DAY_START, hm('08:00'), hm('08:45'), DAY_END]

    def test_whole_segments_keep_full_span(self):
        """Test that wide mode keeps one segment per block."""
        blocks = merge_lessons([
            lesson(id=1, start='08:00', end='09:30', subject='MA'),
            lesson(id=2, start='08:45', end='10:00', subject='EN'),
        ])

        segments = whole_segments(blocks, DAY_START, DAY_END)

        assert [(s.block.id, s.start_time, s.end_time) for s in segments] == [
            (1, hm('08:00'), hm('09:30')),
            (2, hm('08:45'), hm('10:00')),
        ]
