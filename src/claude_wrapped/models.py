"""Data models for claude-wrapped."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class HistoryEntry:
    """One prompt submitted by the user, as recorded in history.jsonl."""
    display: str
    timestamp: Optional[int] = None  # epoch milliseconds
    project: Optional[str] = None
    session_id: Optional[str] = None


@dataclass
class ToolUse:
    """A tool invocation block from an assistant message."""
    name: str
    command: Optional[str] = None


@dataclass
class TranscriptEntry:
    """Represents a parsed event from a session transcript."""
    type: str
    timestamp: Optional[float] = None  # epoch seconds
    session_id: Optional[str] = None
    tool_uses: list[ToolUse] = field(default_factory=list)


@dataclass
class FacetData:
    """Externally computed classification of a single session."""
    session_id: Optional[str] = None
    goal_categories: dict[str, int] = field(default_factory=dict)
    outcome: Optional[str] = None
    friction_counts: dict[str, int] = field(default_factory=dict)


@dataclass
class SessionActivity:
    """Sessions, projects and activity histograms derived from history."""
    session_ids: set[str] = field(default_factory=set)
    projects: set[str] = field(default_factory=set)
    session_timestamps: dict[str, list[int]] = field(default_factory=dict)
    hour_distribution: dict[str, int] = field(default_factory=dict)
    day_of_week_distribution: dict[str, int] = field(default_factory=dict)
    daily_activity: dict[str, int] = field(default_factory=dict)
    first_timestamp: Optional[int] = None


@dataclass
class TranscriptStats:
    """Partial aggregate over one or more transcript files."""
    messages: int = 0
    commits: int = 0
    tools: dict[str, int] = field(default_factory=dict)
    project_messages: dict[str, int] = field(default_factory=dict)
    longest_session_minutes: float = 0.0

    def merge(self, other: "TranscriptStats") -> "TranscriptStats":
        """Combine two partials: counts are summed, session length is maxed."""
        tools = dict(self.tools)
        for name, count in other.tools.items():
            tools[name] = tools.get(name, 0) + count

        project_messages = dict(self.project_messages)
        for project, count in other.project_messages.items():
            project_messages[project] = project_messages.get(project, 0) + count

        return TranscriptStats(
            messages=self.messages + other.messages,
            commits=self.commits + other.commits,
            tools=tools,
            project_messages=project_messages,
            longest_session_minutes=max(self.longest_session_minutes, other.longest_session_minutes),
        )


@dataclass(frozen=True)
class Stats:
    sessions: int
    messages: int
    hours: float
    days: int
    commits: int


@dataclass(frozen=True)
class TimePatterns:
    hour_distribution: dict[str, int]
    day_of_week_distribution: dict[str, int]
    daily_activity: dict[str, int]


@dataclass(frozen=True)
class Highlights:
    busiest_day: str
    busiest_day_count: int
    longest_streak: int
    longest_session_minutes: int
    first_session_date: str
    top_project: str
    rare_tool_name: Optional[str] = None
    rare_tool_count: Optional[int] = None


@dataclass(frozen=True)
class WrappedSummary:
    """
    The derived summary produced by a single extraction run.

    Contains only counts, category labels and short derived strings, never
    prompt text, file paths or tool commands.
    """
    stats: Stats
    tools: dict[str, int]
    time_patterns: TimePatterns
    project_count: int
    goals: dict[str, int]
    highlights: Highlights
    archetype: Optional[str] = None

    def to_dict(self) -> dict:
        """Render the summary in its external JSON shape."""
        return {
            'stats': {
                'sessions': self.stats.sessions,
                'messages': self.stats.messages,
                'hours': self.stats.hours,
                'days': self.stats.days,
                'commits': self.stats.commits,
            },
            'tools': dict(self.tools),
            'timePatterns': {
                'hourDistribution': dict(self.time_patterns.hour_distribution),
                'dayOfWeekDistribution': dict(self.time_patterns.day_of_week_distribution),
                'dailyActivity': dict(self.time_patterns.daily_activity),
            },
            'projectCount': self.project_count,
            'goals': dict(self.goals),
            'archetype': self.archetype,
            'highlights': {
                'busiestDay': self.highlights.busiest_day,
                'busiestDayCount': self.highlights.busiest_day_count,
                'longestStreak': self.highlights.longest_streak,
                'longestSessionMinutes': self.highlights.longest_session_minutes,
                'firstSessionDate': self.highlights.first_session_date,
                'topProject': self.highlights.top_project,
                'rareToolName': self.highlights.rare_tool_name,
                'rareToolCount': self.highlights.rare_tool_count,
            },
        }
