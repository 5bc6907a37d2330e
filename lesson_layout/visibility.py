"""Decide how many columns of a cluster fit the available rendering width.

Two signals are combined:

- a per-cluster fit: how many columns of at least ``min_column_width`` fit
  next to each other, optionally capped by ``max_columns``;
- a coarse collapse flag with hysteresis: below ``enter_width`` the view
  collapses to a single column and only expands again above ``exit_width``,
  so a width oscillating near one boundary does not flicker.

Hidden columns are only hidden; their placed items stay in the layout so a
wider viewport reveals them without recomputing merges or clusters.
"""

from enum import Enum
from typing import Protocol, runtime_checkable

import pydantic
from pydantic import ConfigDict

from .config import LayoutSettings, get_settings
from .errors import ThresholdError
from .logging import get_logger
from .models import VisibilityState

logger = get_logger(__name__)


class ViewportMode(str, Enum):
    WIDE = 'wide'
    CONSTRAINED = 'constrained'


@runtime_checkable
class WidthProvider(Protocol):
    """Anything that can report the current rendering width."""

    def current_width(self) -> float:
        ...


class FixedWidth(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True)

    width: float

    def current_width(self) -> float:
        return self.width


def measure(width) -> float:
    if isinstance(width, WidthProvider):
        return float(width.current_width())
    return float(width)


def validate_thresholds(
    min_column_width: float,
    enter_width: float | None,
    exit_width: float | None,
) -> None:
    if min_column_width <= 0:
        raise ThresholdError('min_column_width must be greater than 0')
    if (enter_width is None) != (exit_width is None):
        raise ThresholdError('enter_width and exit_width must be given together')
    if enter_width is not None and enter_width >= exit_width:
        raise ThresholdError('enter_width must be below exit_width')


def update_collapsed(width: float, previously_collapsed: bool, enter_width: float, exit_width: float) -> bool:
    if width < enter_width:
        return True
    if width > exit_width:
        return False
    return previously_collapsed


def max_fit_columns(available_width: float, min_column_width: float, gap: float = 0.0) -> int:
    """Number of columns of at least ``min_column_width`` that fit side by side."""
    return max(1, int((available_width + gap) // (min_column_width + gap)))


def decide_visibility(
    column_count: int,
    available_width: float,
    min_column_width: float,
    max_columns: int | None,
    previous_state: VisibilityState | None,
    *,
    enter_width: float | None = None,
    exit_width: float | None = None,
    gap: float = 0.0,
) -> VisibilityState:
    """
    Decide how many columns of one cluster are shown in this render pass.

    Args:
        column_count: Columns the assigner opened for the cluster
        available_width: Width of the rendering area
        min_column_width: Narrowest column worth rendering
        max_columns: Hard cap on side-by-side columns, or None for no cap
        previous_state: State returned by the previous pass, if any
        enter_width: Collapse to one column below this width; None disables
            collapsing
        exit_width: Expand again above this width; None disables collapsing
        gap: Space between two columns

    Returns:
        The new visibility state; items with ``column_index >= visible_columns``
        are hidden

    Raises:
        ThresholdError: If the thresholds are inconsistent
    """
    validate_thresholds(min_column_width, enter_width, exit_width)

    previously_collapsed = previous_state.collapsed if previous_state else False
    if enter_width is None:
        collapsed = False
    else:
        collapsed = update_collapsed(available_width, previously_collapsed, enter_width, exit_width)
    if collapsed != previously_collapsed:
        logger.debug("visibility_collapse_changed", collapsed=collapsed, width=available_width)

    if collapsed:
        return VisibilityState(collapsed=True, visible_columns=1)

    fit = max_fit_columns(available_width, min_column_width, gap)
    if max_columns is not None:
        fit = min(fit, max_columns)
    return VisibilityState(collapsed=False, visible_columns=max(1, min(column_count, fit)))


class VisibilityPolicy(pydantic.BaseModel):
    """Visibility thresholds for one rendering mode."""

    model_config = ConfigDict(frozen=True)

    min_column_width: float
    max_columns: int | None = None
    enter_width: float = 195
    exit_width: float = 200
    gap_ratio: float = 0.015

    @pydantic.model_validator(mode='after')
    def validate_policy(self) -> 'VisibilityPolicy':
        validate_thresholds(self.min_column_width, self.enter_width, self.exit_width)
        if self.max_columns is not None and self.max_columns < 1:
            raise ThresholdError('max_columns must be at least 1')
        return self

    def gap_for(self, width: float) -> float:
        return max(0.0, width * self.gap_ratio)

    def decide(self, column_count: int, width, previous_state: VisibilityState | None = None) -> VisibilityState:
        available = measure(width)
        return decide_visibility(
            column_count,
            available,
            self.min_column_width,
            self.max_columns,
            previous_state,
            enter_width=self.enter_width,
            exit_width=self.exit_width,
            gap=self.gap_for(available),
        )

    def update(self, width, previous_state: VisibilityState | None = None) -> VisibilityState:
        """
        Compute the state for a whole render pass.

        ``visible_columns`` is the column budget any cluster may use at this
        width; a cluster shows ``min(column_count, visible_columns)`` columns.
        """
        available = measure(width)
        budget = self.max_columns or max_fit_columns(
            available, self.min_column_width, self.gap_for(available)
        )
        return self.decide(budget, available, previous_state)


def policy_for(mode: ViewportMode, settings: LayoutSettings | None = None) -> VisibilityPolicy:
    """Build the visibility policy for a rendering mode from the settings."""
    settings = settings or get_settings()
    if ViewportMode(mode) == ViewportMode.CONSTRAINED:
        min_column_width = settings.mobile_min_column_width
        max_columns = None
    else:
        min_column_width = settings.desktop_min_column_width
        max_columns = settings.desktop_max_columns

    return VisibilityPolicy(
        min_column_width=min_column_width,
        max_columns=max_columns,
        enter_width=settings.collapse_enter_width,
        exit_width=settings.collapse_exit_width,
        gap_ratio=settings.column_gap_ratio,
    )
