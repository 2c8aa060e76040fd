"""Archetype scoring.

Each archetype scores the summary on a 0-100 scale. A score saturates at 100
once its threshold condition holds and is scaled linearly below it. The
archetype with the highest score wins; exact ties go to whichever comes first
in ARCHETYPES.
"""

from dataclasses import dataclass
from typing import Callable

from .models import WrappedSummary


NIGHT_HOURS = (22, 23, 0, 1, 2, 3)

BUG_GOALS = ('bug_fix', 'debug')
BUILD_GOALS = ('feature', 'build', 'create')

DELEGATION_TOOL = 'Task'
READ_TOOLS = ('Grep', 'Glob', 'Read')
EDIT_TOOLS = ('Edit', 'Write')

TOOL_KINDS_CEILING = 15
STREAK_CEILING_DAYS = 14
PROJECT_CEILING = 5
MESSAGES_PER_SESSION_CEILING = 20


@dataclass(frozen=True)
class SummaryRatios:
    """Derived quantities the archetype formulas are written against."""
    sessions: int
    avg_session_minutes: float
    longest_session_minutes: int
    night_ratio: float
    bug_ratio: float
    build_ratio: float
    tool_kinds: int
    delegation_ratio: float
    longest_streak: int
    project_count: int
    explore_ratio: float
    messages_per_session: float


def _sum_of(counts: dict[str, int], keys) -> int:
    return sum(counts.get(k, 0) for k in keys)


def compute_ratios(summary: WrappedSummary) -> SummaryRatios:
    """Compute the ratios every archetype formula draws on."""
    stats = summary.stats
    hours = summary.time_patterns.hour_distribution

    avg_session_minutes = stats.hours * 60 / stats.sessions if stats.sessions > 0 else 0.0

    total_hour_msgs = sum(hours.values())
    night_msgs = _sum_of(hours, (str(h) for h in NIGHT_HOURS))
    night_ratio = night_msgs / total_hour_msgs if total_hour_msgs > 0 else 0.0

    total_goals = sum(summary.goals.values()) or 1

    read_ops = _sum_of(summary.tools, READ_TOOLS)
    edit_ops = _sum_of(summary.tools, EDIT_TOOLS)
    explore_ratio = read_ops / (read_ops + edit_ops) if read_ops + edit_ops > 0 else 0.0

    delegation = summary.tools.get(DELEGATION_TOOL, 0)

    return SummaryRatios(
        sessions=stats.sessions,
        avg_session_minutes=avg_session_minutes,
        longest_session_minutes=summary.highlights.longest_session_minutes,
        night_ratio=night_ratio,
        bug_ratio=_sum_of(summary.goals, BUG_GOALS) / total_goals,
        build_ratio=_sum_of(summary.goals, BUILD_GOALS) / total_goals,
        tool_kinds=len(summary.tools),
        delegation_ratio=delegation / stats.messages if stats.messages > 0 else 0.0,
        longest_streak=summary.highlights.longest_streak,
        project_count=summary.project_count,
        explore_ratio=explore_ratio,
        messages_per_session=stats.messages / stats.sessions if stats.sessions > 0 else 0.0,
    )


@dataclass(frozen=True)
class Archetype:
    id: str
    label: str
    score: Callable[[SummaryRatios], float]


ARCHETYPES = (
    Archetype(
        'night_owl', 'Night Owl',
        lambda r: 100 if r.night_ratio > 0.4 else r.night_ratio * 200,
    ),
    Archetype(
        'marathoner', 'Marathoner',
        lambda r: 100 if r.avg_session_minutes > 45 and r.longest_session_minutes > 180 else 0,
    ),
    Archetype(
        'sprinter', 'Sprinter',
        lambda r: 100 if r.avg_session_minutes < 10 and r.sessions > 100 else 0,
    ),
    Archetype(
        'bug_hunter', 'Bug Hunter',
        lambda r: 100 if r.bug_ratio > 0.4 else r.bug_ratio * 200,
    ),
    Archetype(
        'builder', 'Builder',
        lambda r: 100 if r.build_ratio > 0.4 else r.build_ratio * 200,
    ),
    Archetype(
        'tool_master', 'Tool Master',
        lambda r: 100 if r.tool_kinds >= TOOL_KINDS_CEILING else r.tool_kinds / TOOL_KINDS_CEILING * 80,
    ),
    Archetype(
        'delegator', 'Delegator',
        lambda r: 100 if r.delegation_ratio > 0.1 else r.delegation_ratio * 800,
    ),
    Archetype(
        'streak_master', 'Streak Master',
        lambda r: 100 if r.longest_streak >= STREAK_CEILING_DAYS else r.longest_streak / STREAK_CEILING_DAYS * 80,
    ),
    Archetype(
        'polyglot', 'Polyglot',
        lambda r: 100 if r.project_count >= PROJECT_CEILING else r.project_count / PROJECT_CEILING * 80,
    ),
    Archetype(
        'deep_diver', 'Deep Diver',
        lambda r: 100 if r.project_count <= 2 and r.sessions > 50 else 0,
    ),
    Archetype(
        'explorer', 'Explorer',
        lambda r: 100 if r.explore_ratio > 0.7 and r.avg_session_minutes < 20 else r.explore_ratio * 80,
    ),
    Archetype(
        'pair_programmer', 'Pair Programmer',
        lambda r: (
            100 if r.messages_per_session > MESSAGES_PER_SESSION_CEILING
            else r.messages_per_session / MESSAGES_PER_SESSION_CEILING * 80
        ),
    ),
)

ARCHETYPE_LABELS = {a.id: a.label for a in ARCHETYPES}


def score_archetypes(summary: WrappedSummary) -> dict[str, float]:
    """Score every archetype, keyed by id in priority order."""
    ratios = compute_ratios(summary)
    return {a.id: float(a.score(ratios)) for a in ARCHETYPES}


def pick_archetype(scores: dict[str, float]) -> str:
    """
    Pick the highest-scoring archetype.

    Walks ARCHETYPES in priority order and only replaces the current best on
    a strictly higher score, so ties go to the earlier archetype.
    """
    best_id = ARCHETYPES[0].id
    best_score = scores.get(best_id, 0.0)
    for archetype in ARCHETYPES[1:]:
        score = scores.get(archetype.id, 0.0)
        if score > best_score:
            best_id, best_score = archetype.id, score
    return best_id


def score_archetype(summary: WrappedSummary) -> str:
    """Return the winning archetype id for a summary."""
    return pick_archetype(score_archetypes(summary))
