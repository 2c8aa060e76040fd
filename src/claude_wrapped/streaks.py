"""Streak statistics over daily activity."""

from datetime import date


def _active_dates(daily_activity: dict[str, int]) -> list[date]:
    dates = set()
    for key, count in daily_activity.items():
        if count <= 0:
            continue
        try:
            dates.add(date.fromisoformat(key))
        except ValueError:
            continue
    return sorted(dates)


def active_days(daily_activity: dict[str, int]) -> int:
    """Count days with at least one recorded event."""
    return sum(1 for count in daily_activity.values() if count > 0)


def longest_streak(daily_activity: dict[str, int]) -> int:
    """
    Get the longest run of consecutive active calendar days.

    Args:
        daily_activity: Mapping of YYYY-MM-DD to event count

    Returns:
        Length of the longest run, 0 if there are no active days
    """
    dates = _active_dates(daily_activity)
    if not dates:
        return 0

    longest = 1
    current = 1
    for prev, curr in zip(dates, dates[1:]):
        if curr.toordinal() - prev.toordinal() == 1:
            current += 1
            longest = max(longest, current)
        else:
            current = 1

    return longest
