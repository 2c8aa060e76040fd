"""Goal classification from prompt text and facet overlays."""

import re
from typing import Iterable, Optional

from .models import FacetData, HistoryEntry


# Checked in order; the first category whose pattern matches wins
GOAL_PATTERNS = [
    ('bug_fix', re.compile(r'\b(fix|bug|broken|error|crash|issue|wrong|fail)\b')),
    ('feature', re.compile(r'\b(add|create|implement|build|new|feature)\b')),
    ('refactor', re.compile(r'\b(refactor|clean|reorganize|restructure|simplify)\b')),
    ('devops', re.compile(r'\b(deploy|ci|cd|docker|infra|devops|pipeline)\b')),
    ('docs', re.compile(r'\b(doc|readme|comment|document)\b')),
    ('test', re.compile(r'\b(test|spec|coverage)\b')),
    ('explore', re.compile(r'\b(explore|understand|how does|where is|find)\b')),
]

GOAL_CATEGORIES = tuple(category for category, _ in GOAL_PATTERNS)


def classify_goal_from_prompt(prompt: str) -> Optional[str]:
    """Classify a prompt into a goal category, or None if nothing matches."""
    lower = prompt.lower()
    for category, pattern in GOAL_PATTERNS:
        if pattern.search(lower):
            return category
    return None


def classify_goals(history: Iterable[HistoryEntry]) -> dict[str, int]:
    """Count heuristic goal categories over all history prompts."""
    goals: dict[str, int] = {}
    for entry in history:
        if not entry.display:
            continue
        goal = classify_goal_from_prompt(entry.display)
        if goal:
            goals[goal] = goals.get(goal, 0) + 1
    return goals


def merge_facet_goals(goals: dict[str, int], facets: Iterable[FacetData]) -> dict[str, int]:
    """
    Add facet goal counts on top of heuristic goals.

    Categories the heuristic never produces are kept as-is.
    """
    merged = dict(goals)
    for facet in facets:
        for category, count in facet.goal_categories.items():
            merged[category] = merged.get(category, 0) + count
    return merged
