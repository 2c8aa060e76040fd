"""Tolerant readers for history, transcript and facet logs."""

from pathlib import Path
from typing import Iterator, Optional, Union
from datetime import datetime
import json
import math
import os
import sys

from .models import FacetData, HistoryEntry, ToolUse, TranscriptEntry
from .paths import SKIPPED_DIRS
from .sanitize import is_safe_label


def parse_jsonl(path: Path, warn: bool = False) -> Iterator[dict]:
    """
    Stream parse a JSONL file, yielding JSON objects in file order.

    The logs are appended to by a live process, so the last line may be
    truncated. Lines that fail to parse or are not objects are skipped, and a
    missing or unreadable file yields nothing. With warn=True, skipped lines
    are reported on stderr by location only (the content may hold secrets).
    """
    try:
        f = open(path, 'r', encoding='utf-8', errors='replace')
    except OSError as e:
        if warn:
            print(f"Warning: Cannot read {path} ({type(e).__name__})", file=sys.stderr)
        return

    with f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                if warn:
                    print(f"Warning: Skipping malformed JSON at {path}:{line_num} ({type(e).__name__})", file=sys.stderr)
                continue
            if not isinstance(record, dict):
                if warn:
                    print(f"Warning: Skipping non-object record at {path}:{line_num}", file=sys.stderr)
                continue
            yield record


def read_jsonl(path: Path, warn: bool = False) -> list[dict]:
    """Read every parseable record of a JSONL file into a list."""
    return list(parse_jsonl(path, warn=warn))


def find_jsonl_files(root: Path, suffix: str = '.jsonl') -> list[Path]:
    """
    Recursively find files ending with suffix under root.

    Directories in SKIPPED_DIRS are not descended into. Subtrees that cannot
    be listed contribute nothing. Entries are visited in name order so the
    result is stable across runs.
    """
    files: list[Path] = []
    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError:
        return files

    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                if entry.name not in SKIPPED_DIRS:
                    files.extend(find_jsonl_files(Path(entry.path), suffix))
            elif entry.is_file(follow_symlinks=False) and entry.name.endswith(suffix):
                files.append(Path(entry.path))
        except OSError:
            continue

    return files


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def parse_timestamp(ts: Union[str, int, float, None]) -> Optional[float]:
    """
    Parse a transcript timestamp into epoch seconds.

    Handles ISO 8601 strings (with or without a Z suffix) and Unix
    milliseconds. Returns None for anything else.
    """
    if isinstance(ts, str):
        try:
            return datetime.fromisoformat(ts.replace('Z', '+00:00')).timestamp()
        except (ValueError, OverflowError, OSError):
            return None
    if _is_number(ts) and ts > 0:
        return ts / 1000
    return None


def parse_history_entry(record: dict) -> HistoryEntry:
    """Normalize a history.jsonl record into a HistoryEntry."""
    display = record.get('display')
    timestamp = record.get('timestamp')
    project = record.get('project')
    session_id = record.get('sessionId')

    return HistoryEntry(
        display=display if isinstance(display, str) else '',
        timestamp=int(timestamp) if _is_number(timestamp) and timestamp > 0 else None,
        project=project if isinstance(project, str) and project else None,
        session_id=session_id if isinstance(session_id, str) and session_id else None,
    )


def read_history(path: Path, warn: bool = False) -> list[HistoryEntry]:
    """Read all prompt history entries from history.jsonl."""
    return [parse_history_entry(record) for record in parse_jsonl(path, warn=warn)]


def _message_content(message) -> list:
    """
    Get the content block list of a transcript message.

    The message is usually an object, but some writers serialize it to a
    JSON string first.
    """
    if isinstance(message, str):
        try:
            message = json.loads(message)
        except json.JSONDecodeError:
            return []
    if not isinstance(message, dict):
        return []

    content = message.get('content')
    if not isinstance(content, list):
        return []
    return content


def _extract_tool_uses(content: list) -> list[ToolUse]:
    """
    Extract named tool_use blocks from a content array.

    Tool names end up in the summary, so names that are not safe labels are
    dropped.
    """
    tool_uses = []
    for block in content:
        if not isinstance(block, dict) or block.get('type') != 'tool_use':
            continue
        name = block.get('name')
        if not isinstance(name, str) or not name or not is_safe_label(name):
            continue
        tool_input = block.get('input')
        command = tool_input.get('command') if isinstance(tool_input, dict) else None
        tool_uses.append(ToolUse(
            name=name,
            command=command if isinstance(command, str) else None,
        ))
    return tool_uses


def parse_transcript_entry(record: dict) -> TranscriptEntry:
    """
    Normalize a transcript record into a TranscriptEntry.

    Tool uses are only extracted from assistant entries.
    """
    entry_type = record.get('type')
    entry_type = entry_type if isinstance(entry_type, str) else ''
    session_id = record.get('sessionId')

    tool_uses: list[ToolUse] = []
    if entry_type == 'assistant':
        tool_uses = _extract_tool_uses(_message_content(record.get('message')))

    return TranscriptEntry(
        type=entry_type,
        timestamp=parse_timestamp(record.get('timestamp')),
        session_id=session_id if isinstance(session_id, str) else None,
        tool_uses=tool_uses,
    )


def get_transcript_entries(path: Path, warn: bool = False) -> Iterator[TranscriptEntry]:
    """Yield normalized entries from a session transcript file."""
    for record in parse_jsonl(path, warn=warn):
        yield parse_transcript_entry(record)


def _clean_counts(value, source: Path, warn: bool = False) -> dict[str, int]:
    """
    Keep only non-negative integer counts from a category mapping.

    Category names are copied into the summary, so names that are not safe
    labels are dropped (reported by file only).
    """
    if not isinstance(value, dict):
        return {}
    counts = {}
    for key, count in value.items():
        if isinstance(count, float) and count.is_integer():
            count = int(count)
        if isinstance(count, int) and not isinstance(count, bool) and count >= 0:
            key = str(key)
            if not is_safe_label(key):
                if warn:
                    print(f"Warning: Dropping unsafe category name in {source.name}", file=sys.stderr)
                continue
            counts[key] = count
    return counts


def read_facets(facets_dir: Path, warn: bool = False) -> list[FacetData]:
    """
    Read facet files (one JSON object per *.json file).

    Returns an empty list if the directory doesn't exist. Unreadable or
    malformed files are skipped.
    """
    try:
        paths = sorted(p for p in facets_dir.glob('*.json') if p.is_file())
    except OSError:
        return []

    facets = []
    for path in paths:
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            if warn:
                print(f"Warning: Skipping facet file {path.name} ({type(e).__name__})", file=sys.stderr)
            continue
        if not isinstance(data, dict):
            continue

        session_id = data.get('session_id')
        outcome = data.get('outcome')
        facets.append(FacetData(
            session_id=session_id if isinstance(session_id, str) else None,
            goal_categories=_clean_counts(data.get('goal_categories'), path, warn),
            outcome=outcome if isinstance(outcome, str) else None,
            friction_counts=_clean_counts(data.get('friction_counts'), path, warn),
        ))

    return facets
