"""Error hierarchy for the layout engine.

The engine has no fallible I/O, so every error here describes malformed input
or an invalid configuration. Malformed lessons are dropped by the ingestion
layer rather than aborting a layout.
"""


class LayoutError(Exception):
    """Base exception for all layout engine errors."""

    pass


class MalformedRecordError(LayoutError, ValueError):
    """A raw lesson record cannot be turned into a valid lesson.

    Examples: end time not after start time, missing id, unparseable date.
    """

    pass


class ThresholdError(LayoutError, ValueError):
    """Visibility thresholds are inconsistent.

    Examples: collapse enter width not below exit width, non-positive minimum
    column width.
    """

    pass
