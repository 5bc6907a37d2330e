"""Run the full layout for one day: merge, slice, place, decide visibility."""

import pydantic

from .columns import assign_columns
from .config import LayoutSettings, get_settings
from .logging import get_logger
from .merging import merge_lessons
from .models import ExamOverlay, MergedBlock, PlacedBlock, VisibilityState
from .overlays import derive_exam_overlays, visible_overlays
from .segments import slice_segments, whole_segments
from .visibility import ViewportMode, policy_for

logger = get_logger(__name__)


class DayLayout(pydantic.BaseModel):
    """Everything the renderer needs to paint one day column."""

    model_config = pydantic.ConfigDict(frozen=True)

    mode: ViewportMode
    blocks: list[MergedBlock]
    placed: list[PlacedBlock]
    overlays: list[ExamOverlay]
    state: VisibilityState
    visible_columns: dict[int, int]

    def is_visible(self, placed: PlacedBlock) -> bool:
        return placed.column_index < self.visible_columns.get(placed.cluster_id, placed.column_count)

    @property
    def visible_placed(self) -> list[PlacedBlock]:
        return [p for p in self.placed if self.is_visible(p)]

    @property
    def hidden_placed(self) -> list[PlacedBlock]:
        return [p for p in self.placed if not self.is_visible(p)]

    @property
    def visible_overlays(self) -> list[ExamOverlay]:
        return visible_overlays(self.overlays, self.visible_columns)


def layout_day(
    records,
    width,
    mode: ViewportMode = ViewportMode.WIDE,
    previous_state: VisibilityState | None = None,
    settings: LayoutSettings | None = None,
) -> DayLayout:
    """
    Lay out one day's lessons for the given rendering width.

    Algorithm:
    1. Merge records of the same lesson into blocks
    2. In width-constrained mode, slice blocks into atomic segments;
       otherwise use one segment per block clamped to the day window
    3. Cluster overlapping segments and assign columns
    4. Update the collapse flag and decide the visible columns per cluster
    5. Derive exam overlays

    Args:
        records: Lesson records of one day
        width: Available width, as a number or a WidthProvider
        mode: Wide or width-constrained rendering
        previous_state: ``state`` of the previous layout of this day column
        settings: Thresholds; defaults to the environment-loaded settings

    Returns:
        The day layout; pass its ``state`` into the next call
    """
    settings = settings or get_settings()
    mode = ViewportMode(mode)
    policy = policy_for(mode, settings)
    day_start, day_end = settings.day_start_minutes, settings.day_end_minutes

    blocks = merge_lessons(records, settings.merge_max_break_minutes)
    if mode == ViewportMode.CONSTRAINED:
        items = slice_segments(blocks, day_start, day_end)
    else:
        items = whole_segments(blocks, day_start, day_end)
    placed = assign_columns(items)

    state = policy.update(width, previous_state)
    visible_columns = {}
    for item in placed:
        visible_columns.setdefault(item.cluster_id, min(item.column_count, state.visible_columns))

    overlays = derive_exam_overlays(placed, day_start, day_end)

    logger.debug(
        "day_laid_out",
        mode=mode.value,
        blocks=len(blocks),
        placed=len(placed),
        clusters=len(visible_columns),
        collapsed=state.collapsed,
    )
    return DayLayout(
        mode=mode,
        blocks=blocks,
        placed=placed,
        overlays=overlays,
        state=state,
        visible_columns=visible_columns,
    )
