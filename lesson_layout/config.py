"""Layout engine configuration loaded from environment variables.

Every threshold the engine uses lives here so the rendering collaborator can
tune them per deployment without touching the algorithms.
"""

import pydantic
from pydantic import Field
from pydantic_settings import BaseSettings


class LayoutSettings(BaseSettings):
    """Layout configuration loaded from environment variables.

    Settings are loaded from ``LESSON_LAYOUT_*`` environment variables with
    defaults matching the personal timetable view. For local development,
    create a .env file in the project root.
    """

    # Merging
    merge_max_break_minutes: int = Field(
        default=5,
        description="Largest break (minutes) between two records of one lesson",
    )

    # Visible day window (minutes since midnight)
    day_start_minutes: int = Field(
        default=7 * 60 + 40,
        description="First minute of the rendered day (07:40)",
    )
    day_end_minutes: int = Field(
        default=17 * 60 + 15,
        description="Last minute of the rendered day (17:15)",
    )

    # Column visibility
    desktop_min_column_width: float = Field(
        default=60,
        description="Minimum width per column in wide mode before hiding columns",
    )
    mobile_min_column_width: float = Field(
        default=140,
        description="Minimum width per column in width-constrained mode",
    )
    desktop_max_columns: int = Field(
        default=3,
        description="Maximum number of side-by-side columns in wide mode",
    )
    column_gap_ratio: float = Field(
        default=0.015,
        description="Gap between columns as a fraction of the available width",
    )

    # Collapse hysteresis
    collapse_enter_width: float = Field(
        default=195,
        description="Collapse to a single column when narrower than this",
    )
    collapse_exit_width: float = Field(
        default=200,
        description="Re-enable side-by-side columns when wider than this",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "LESSON_LAYOUT_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @pydantic.field_validator('merge_max_break_minutes')
    @classmethod
    def validate_max_break(cls, v: int) -> int:
        if v < 0:
            raise ValueError('merge_max_break_minutes cannot be negative')
        return v

    @pydantic.field_validator(
        'desktop_min_column_width', 'mobile_min_column_width', 'desktop_max_columns'
    )
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError('column widths and counts must be greater than 0')
        return v

    @pydantic.model_validator(mode='after')
    def validate_ranges(self) -> 'LayoutSettings':
        if self.day_end_minutes <= self.day_start_minutes:
            raise ValueError('day_end_minutes must be after day_start_minutes')
        if self.collapse_enter_width >= self.collapse_exit_width:
            raise ValueError('collapse_enter_width must be below collapse_exit_width')
        return self

    @classmethod
    def class_timetable(cls, **overrides) -> 'LayoutSettings':
        """Preset for class timetables, which pack far more parallel lessons."""
        values = {
            'desktop_min_column_width': 28,
            'collapse_enter_width': 100,
            'collapse_exit_width': 105,
        }
        values.update(overrides)
        return cls(**values)


_settings: LayoutSettings | None = None


def get_settings() -> LayoutSettings:
    """Get the layout settings singleton.

    Returns:
        LayoutSettings: Layout settings instance
    """
    global _settings
    if _settings is None:
        _settings = LayoutSettings()
    return _settings
