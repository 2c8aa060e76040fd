"""Tool usage, message and session-length aggregation over transcripts."""

from functools import reduce
from pathlib import Path
from typing import Iterable, Optional

from .models import ToolUse, TranscriptStats
from .parser import get_transcript_entries


# Tools that execute shell commands
SHELL_TOOL_NAMES = frozenset({'Bash'})

COMMIT_MARKER = 'git commit'

MESSAGE_TYPES = ('user', 'assistant')


def project_for_file(path: Path, projects_dir: Path) -> Optional[str]:
    """
    Get the project directory a transcript belongs to.

    This is the first path segment below projects_dir. Files directly in
    projects_dir, or outside it, belong to no project.
    """
    try:
        parts = path.relative_to(projects_dir).parts
    except ValueError:
        return None
    if len(parts) < 2:
        return None
    return parts[0]


def is_commit(tool_use: ToolUse) -> bool:
    """Check if a tool use runs a git commit through the shell."""
    return (
        tool_use.name in SHELL_TOOL_NAMES
        and tool_use.command is not None
        and COMMIT_MARKER in tool_use.command
    )


def aggregate_transcript(path: Path, projects_dir: Path, warn: bool = False) -> TranscriptStats:
    """
    Aggregate a single transcript file.

    Counts user/assistant messages (also per project), tool invocations and
    commits, and measures the span between the earliest and latest
    timestamps in the file.
    """
    project = project_for_file(path, projects_dir)

    messages = 0
    commits = 0
    tools: dict[str, int] = {}
    session_start: Optional[float] = None
    session_end: Optional[float] = None

    for entry in get_transcript_entries(path, warn=warn):
        if entry.type in MESSAGE_TYPES:
            messages += 1

        if entry.timestamp is not None:
            if session_start is None or entry.timestamp < session_start:
                session_start = entry.timestamp
            if session_end is None or entry.timestamp > session_end:
                session_end = entry.timestamp

        for tool_use in entry.tool_uses:
            tools[tool_use.name] = tools.get(tool_use.name, 0) + 1
            if is_commit(tool_use):
                commits += 1

    longest = 0.0
    if session_start is not None and session_end is not None:
        longest = (session_end - session_start) / 60

    return TranscriptStats(
        messages=messages,
        commits=commits,
        tools=tools,
        project_messages={project: messages} if project and messages else {},
        longest_session_minutes=longest,
    )


def collect_transcript_stats(
    files: Iterable[Path],
    projects_dir: Path,
    warn: bool = False
) -> TranscriptStats:
    """Aggregate transcripts file by file and fold the partial results."""
    partials = (aggregate_transcript(f, projects_dir, warn=warn) for f in files)
    return reduce(TranscriptStats.merge, partials, TranscriptStats())
