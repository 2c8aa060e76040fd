"""Session discovery and time-pattern collection from prompt history."""

import re
from datetime import datetime, tzinfo
from typing import Iterable, Optional

from .models import HistoryEntry, SessionActivity


# Projects named like this are the assistant's own config dir, not user work
EXCLUDED_PROJECTS = frozenset({'.claude'})

# Sessions with a single prompt are assumed to last this long
SINGLE_PROMPT_SESSION_MINUTES = 5

PATH_SEPARATOR_PATTERN = re.compile(r'[/\\]')


def normalize_project_name(project_path: str) -> Optional[str]:
    """
    Reduce a project path to its final segment.

    Both / and \\ separate segments, whichever platform recorded the path.
    Returns None for empty names and excluded directories.
    """
    name = PATH_SEPARATOR_PATTERN.split(project_path.rstrip('/\\'))[-1]
    if not name or name in EXCLUDED_PROJECTS:
        return None
    return name


def _to_datetime(timestamp_ms: int, tz: Optional[tzinfo]) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz)
    except (OverflowError, OSError, ValueError):
        return None


def _increment(counts: dict[str, int], key: str) -> None:
    counts[key] = counts.get(key, 0) + 1


def collect_session_activity(
    history: Iterable[HistoryEntry],
    tz: Optional[tzinfo] = None
) -> SessionActivity:
    """
    Collect sessions, projects and activity histograms from history entries.

    Args:
        history: Parsed prompt history
        tz: Timezone to bucket timestamps in (None = local time)

    Returns:
        SessionActivity with hour ("0".."23"), day-of-week ("0".."6", Sunday
        first) and calendar-day (YYYY-MM-DD) histograms
    """
    activity = SessionActivity()

    for entry in history:
        if entry.session_id:
            activity.session_ids.add(entry.session_id)
            timestamps = activity.session_timestamps.setdefault(entry.session_id, [])
            if entry.timestamp is not None:
                timestamps.append(entry.timestamp)

        if entry.project:
            project_name = normalize_project_name(entry.project)
            if project_name:
                activity.projects.add(project_name)

        if entry.timestamp is None:
            continue
        when = _to_datetime(entry.timestamp, tz)
        if when is None:
            continue

        if activity.first_timestamp is None or entry.timestamp < activity.first_timestamp:
            activity.first_timestamp = entry.timestamp

        _increment(activity.hour_distribution, str(when.hour))
        # weekday() starts on Monday; buckets start on Sunday
        _increment(activity.day_of_week_distribution, str((when.weekday() + 1) % 7))
        _increment(activity.daily_activity, when.date().isoformat())

    return activity


def estimate_hours(session_timestamps: dict[str, list[int]]) -> float:
    """
    Estimate total hours spent across sessions.

    Each session spans from its first to its last prompt. Sessions with
    fewer than two prompts count as SINGLE_PROMPT_SESSION_MINUTES.
    """
    total_hours = 0.0
    for timestamps in session_timestamps.values():
        if len(timestamps) < 2:
            total_hours += SINGLE_PROMPT_SESSION_MINUTES / 60
        else:
            total_hours += (max(timestamps) - min(timestamps)) / (1000 * 60 * 60)
    return total_hours
