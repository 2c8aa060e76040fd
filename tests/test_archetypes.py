"""Tests for archetype scoring."""

import pytest

from claude_wrapped.models import Highlights, Stats, TimePatterns, WrappedSummary
from claude_wrapped.archetypes import (
    ARCHETYPES,
    compute_ratios,
    score_archetypes,
    pick_archetype,
    score_archetype,
)


def make_summary(
    sessions=0, messages=0, hours=0.0, tools=None, hour_distribution=None,
    goals=None, project_count=0, longest_streak=0, longest_session_minutes=0,
) -> WrappedSummary:
    return WrappedSummary(
        stats=Stats(sessions=sessions, messages=messages, hours=hours, days=0, commits=0),
        tools=tools or {},
        time_patterns=TimePatterns(
            hour_distribution=hour_distribution or {},
            day_of_week_distribution={},
            daily_activity={},
        ),
        project_count=project_count,
        goals=goals or {},
        highlights=Highlights(
            busiest_day='2024-01-01',
            busiest_day_count=0,
            longest_streak=longest_streak,
            longest_session_minutes=longest_session_minutes,
            first_session_date='2024-01-01',
            top_project='Unknown',
        ),
    )


class TestArchetypeList:
    """Tests for the fixed archetype list."""

    def test_twelve_in_priority_order(self):
        assert [a.id for a in ARCHETYPES] == [
            'night_owl', 'marathoner', 'sprinter', 'bug_hunter', 'builder', 'tool_master',
            'delegator', 'streak_master', 'polyglot', 'deep_diver', 'explorer', 'pair_programmer',
        ]


class TestComputeRatios:
    """Tests for compute_ratios function."""

    def test_empty_summary(self):
        """Zero denominators give zero ratios."""
        ratios = compute_ratios(make_summary())

        assert ratios.avg_session_minutes == 0
        assert ratios.night_ratio == 0
        assert ratios.bug_ratio == 0
        assert ratios.delegation_ratio == 0
        assert ratios.explore_ratio == 0
        assert ratios.messages_per_session == 0

    def test_ratios(self):
        summary = make_summary(
            sessions=4, messages=40, hours=2.0,
            tools={'Read': 3, 'Grep': 3, 'Edit': 2, 'Task': 4},
            hour_distribution={'23': 1, '2': 1, '12': 2},
            goals={'bug_fix': 1, 'debug': 1, 'feature': 2},
        )

        ratios = compute_ratios(summary)

        assert ratios.avg_session_minutes == pytest.approx(30)
        assert ratios.night_ratio == pytest.approx(0.5)
        assert ratios.bug_ratio == pytest.approx(0.5)
        assert ratios.build_ratio == pytest.approx(0.5)
        assert ratios.tool_kinds == 4
        assert ratios.delegation_ratio == pytest.approx(0.1)
        assert ratios.explore_ratio == pytest.approx(0.75)
        assert ratios.messages_per_session == pytest.approx(10)


class TestScoreArchetypes:
    """Tests for score_archetypes function."""

    def test_scores_bounded(self):
        summary = make_summary(
            sessions=500, messages=20000, hours=10.0, tools={f't{i}': 1 for i in range(30)},
            hour_distribution={'1': 10}, goals={'bug_fix': 10}, project_count=40,
            longest_streak=100, longest_session_minutes=999,
        )

        for score in score_archetypes(summary).values():
            assert 0 <= score <= 100

    def test_night_owl_saturates(self):
        scores = score_archetypes(make_summary(hour_distribution={'23': 5, '12': 5}))

        assert scores['night_owl'] == 100

    def test_night_owl_linear_below_threshold(self):
        scores = score_archetypes(make_summary(hour_distribution={'23': 1, '12': 3}))

        assert scores['night_owl'] == pytest.approx(50)

    def test_marathoner(self):
        long_sessions = make_summary(sessions=2, hours=2.0, longest_session_minutes=200)
        short_peak = make_summary(sessions=2, hours=2.0, longest_session_minutes=150)

        assert score_archetypes(long_sessions)['marathoner'] == 100
        assert score_archetypes(short_peak)['marathoner'] == 0

    def test_sprinter(self):
        assert score_archetypes(make_summary(sessions=101, hours=5.0))['sprinter'] == 100
        assert score_archetypes(make_summary(sessions=100, hours=5.0))['sprinter'] == 0

    def test_tool_master_scale(self):
        scores = score_archetypes(make_summary(tools={f't{i}': 1 for i in range(6)}))

        assert scores['tool_master'] == pytest.approx(32)

    def test_streak_master(self):
        assert score_archetypes(make_summary(longest_streak=14))['streak_master'] == 100
        assert score_archetypes(make_summary(longest_streak=7))['streak_master'] == pytest.approx(40)

    def test_polyglot_and_deep_diver(self):
        assert score_archetypes(make_summary(project_count=5))['polyglot'] == 100
        assert score_archetypes(make_summary(project_count=2, sessions=51))['deep_diver'] == 100
        assert score_archetypes(make_summary(project_count=3, sessions=51))['deep_diver'] == 0

    def test_explorer_needs_short_sessions(self):
        tools = {'Read': 8, 'Edit': 2}
        short = make_summary(sessions=2, hours=0.5, tools=tools)
        long = make_summary(sessions=2, hours=2.0, tools=tools)

        assert score_archetypes(short)['explorer'] == 100
        assert score_archetypes(long)['explorer'] == pytest.approx(64)

    def test_pair_programmer(self):
        assert score_archetypes(make_summary(sessions=1, messages=21))['pair_programmer'] == 100
        assert score_archetypes(make_summary(sessions=2, messages=20))['pair_programmer'] == pytest.approx(40)


class TestPickArchetype:
    """Tests for pick_archetype function."""

    def test_highest_wins(self):
        scores = {a.id: 0.0 for a in ARCHETYPES}
        scores['polyglot'] = 42.0

        assert pick_archetype(scores) == 'polyglot'

    def test_tie_goes_to_earlier(self):
        """Equal top scores resolve to the earlier archetype."""
        scores = {a.id: 10.0 for a in ARCHETYPES}
        scores['explorer'] = 100.0
        scores['delegator'] = 100.0

        assert pick_archetype(scores) == 'delegator'

    def test_tie_independent_of_dict_order(self):
        scores = {a.id: 0.0 for a in reversed(ARCHETYPES)}
        scores['pair_programmer'] = 80.0
        scores['builder'] = 80.0

        assert pick_archetype(scores) == 'builder'

    def test_all_zero_picks_first(self):
        assert pick_archetype({a.id: 0.0 for a in ARCHETYPES}) == 'night_owl'

    def test_reproducible(self):
        summary = make_summary(sessions=3, messages=30, goals={'feature': 5})

        assert {score_archetype(summary) for _ in range(5)} == {'builder'}
