"""Helpers for the day-local minute encoding used throughout the engine."""

MINUTES_PER_DAY = 24 * 60


def untis_to_minutes(hhmm: int) -> int:
    """
    Convert an HHMM integer (e.g. 740 for 07:40) to minutes since midnight.

    Args:
        hhmm: Time of day encoded as hours * 100 + minutes

    Returns:
        Minutes since midnight
    """
    hours, minutes = divmod(int(hhmm), 100)
    return hours * 60 + minutes


def minutes_to_untis(minutes: int) -> int:
    hours, rest = divmod(int(minutes), 60)
    return hours * 100 + rest


def format_minutes(minutes: int) -> str:
    hours, rest = divmod(int(minutes), 60)
    return f"{hours:02d}:{rest:02d}"


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))
