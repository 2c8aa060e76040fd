"""Build the wrapped summary from a log directory."""

import math
import sys
from dataclasses import replace
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Iterable, Optional

from .archetypes import ARCHETYPE_LABELS, score_archetype
from .goals import classify_goals, merge_facet_goals
from .models import Highlights, Stats, TimePatterns, TranscriptStats, WrappedSummary
from .parser import find_jsonl_files, read_facets, read_history
from .paths import get_facets_dir, get_history_path, get_projects_dir
from .sanitize import project_display_name
from .sessions import collect_session_activity, estimate_hours
from .streaks import active_days, longest_streak
from .transcripts import collect_transcript_stats


UNKNOWN_PROJECT = 'Unknown'


def _round_half_up(value: float, digits: int = 0) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def _first_max(counts: dict[str, int]) -> Optional[tuple[str, int]]:
    """Highest-count item, earliest inserted on ties."""
    best = None
    for key, count in counts.items():
        if best is None or count > best[1]:
            best = (key, count)
    return best


def _first_min(counts: dict[str, int]) -> Optional[tuple[str, int]]:
    """Lowest-count item, earliest inserted on ties."""
    best = None
    for key, count in counts.items():
        if best is None or count < best[1]:
            best = (key, count)
    return best


def _progress(verbose: bool, message: str) -> None:
    if verbose:
        print(message, file=sys.stderr)


def build_highlights(
    daily_activity: dict[str, int],
    transcripts: TranscriptStats,
    first_timestamp: Optional[int],
    project_paths: Iterable[str],
    tz: Optional[tzinfo],
    today: date,
) -> Highlights:
    """
    Derive the highlight scalars from aggregated activity.

    The top project is reported by the final segment of its recorded path,
    or UNKNOWN_PROJECT when that cannot be resolved.
    """
    busiest = _first_max(daily_activity)
    rarest = _first_min(transcripts.tools)
    top_project = _first_max(transcripts.project_messages)
    top_project_name = project_display_name(top_project[0], project_paths) if top_project else None

    if first_timestamp is not None:
        first_session_date = datetime.fromtimestamp(first_timestamp / 1000, tz=tz).date().isoformat()
    else:
        first_session_date = today.isoformat()

    return Highlights(
        busiest_day=busiest[0] if busiest else today.isoformat(),
        busiest_day_count=busiest[1] if busiest else 0,
        longest_streak=longest_streak(daily_activity),
        longest_session_minutes=int(_round_half_up(transcripts.longest_session_minutes)),
        first_session_date=first_session_date,
        top_project=top_project_name or UNKNOWN_PROJECT,
        rare_tool_name=rarest[0] if rarest else None,
        rare_tool_count=rarest[1] if rarest else None,
    )


def build_summary(
    claude_dir: Path,
    tz: Optional[tzinfo] = None,
    today: Optional[date] = None,
    verbose: bool = False
) -> WrappedSummary:
    """
    Read every log under claude_dir and compute the wrapped summary.

    Missing files and malformed records contribute nothing; this never
    fails on bad input.

    Args:
        claude_dir: The assistant's configuration directory
        tz: Timezone for time-of-day and calendar buckets (None = local time)
        today: Fallback date when there is no activity (defaults to today)
        verbose: Print progress and skipped-record warnings to stderr

    Returns:
        The WrappedSummary, archetype included
    """
    today = today or date.today()

    history_path = get_history_path(claude_dir)
    _progress(verbose, f"Reading {history_path.name}...")
    history = read_history(history_path, warn=verbose)
    _progress(verbose, f"Found {len(history)} history entries")

    activity = collect_session_activity(history, tz=tz)

    _progress(verbose, "Reading transcripts...")
    projects_dir = get_projects_dir(claude_dir)
    transcript_files = find_jsonl_files(projects_dir)
    _progress(verbose, f"Found {len(transcript_files)} transcript files")
    transcripts = collect_transcript_stats(transcript_files, projects_dir, warn=verbose)

    _progress(verbose, "Computing goals...")
    facets = read_facets(get_facets_dir(claude_dir), warn=verbose)
    goals = merge_facet_goals(classify_goals(history), facets)

    draft = WrappedSummary(
        stats=Stats(
            sessions=len(activity.session_ids),
            messages=transcripts.messages,
            hours=_round_half_up(estimate_hours(activity.session_timestamps), 1),
            days=active_days(activity.daily_activity),
            commits=transcripts.commits,
        ),
        tools=transcripts.tools,
        time_patterns=TimePatterns(
            hour_distribution=activity.hour_distribution,
            day_of_week_distribution=activity.day_of_week_distribution,
            daily_activity=activity.daily_activity,
        ),
        project_count=len(activity.projects),
        goals=goals,
        highlights=build_highlights(
            activity.daily_activity,
            transcripts,
            activity.first_timestamp,
            [entry.project for entry in history if entry.project],
            tz,
            today,
        ),
    )

    return replace(draft, archetype=score_archetype(draft))


def format_summary_report(summary: WrappedSummary) -> str:
    """
    Format a summary as a human-readable report.
    """
    stats = summary.stats
    highlights = summary.highlights
    label = ARCHETYPE_LABELS.get(summary.archetype, summary.archetype)

    lines = []
    lines.append("Claude Code Wrapped")
    lines.append("=" * 50)
    lines.append("")
    lines.append(f"Sessions: {stats.sessions}")
    lines.append(f"Messages: {stats.messages}")
    lines.append(f"Hours: {stats.hours}")
    lines.append(f"Active Days: {stats.days}")
    lines.append(f"Commits: {stats.commits}")
    lines.append(f"Tools Used: {len(summary.tools)}")
    lines.append(f"Projects: {summary.project_count}")
    lines.append(f"Longest Streak: {highlights.longest_streak} days")
    lines.append(f"Archetype: {label}")
    lines.append("")
    lines.append("Highlights")
    lines.append("-" * 40)
    lines.append(f"  Busiest day: {highlights.busiest_day} ({highlights.busiest_day_count} prompts)")
    lines.append(f"  Longest session: {highlights.longest_session_minutes} min")
    lines.append(f"  First session: {highlights.first_session_date}")
    lines.append(f"  Top project: {highlights.top_project}")
    if highlights.rare_tool_name is not None:
        lines.append(f"  Rarest tool: {highlights.rare_tool_name} ({highlights.rare_tool_count}x)")

    if summary.goals:
        lines.append("")
        lines.append("Goals")
        lines.append("-" * 40)
        for category, count in sorted(summary.goals.items(), key=lambda kv: (-kv[1], kv[0])):
            lines.append(f"  {category}: {count}")

    return '\n'.join(lines)
