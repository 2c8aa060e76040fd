"""LLM-based facet extraction for sessions.

Writes one facet file per session into usage-data/facets, in the format
read_facets() overlays onto the heuristic goal counts.
"""

import json
import os
import re
import sys
from pathlib import Path
from typing import Optional

from .goals import GOAL_CATEGORIES
from .parser import find_jsonl_files, parse_jsonl
from .paths import get_facets_dir, get_projects_dir
from .sanitize import sanitize_content, validate_no_secrets


DEFAULT_MODEL = "claude-sonnet-4-20250514"

MAX_TRANSCRIPT_CHARS = 30000

FACET_PROMPT = """Analyze this coding assistant session and extract structured facets.

RESPOND WITH ONLY A VALID JSON OBJECT with these fields:
- goal_categories (object: category -> count). Use these categories where they fit:
  {categories}. Other short snake_case categories are allowed.
- outcome: fully_achieved|mostly_achieved|partially_achieved|not_achieved|unclear_from_transcript
- friction_counts (object: friction type -> count)

GUIDELINES:
1. goal_categories: count ONLY what the USER explicitly asked for.
2. friction_counts: be specific about what went wrong; use {{}} if nothing did.
3. Do not quote the transcript. Do not include file paths, commands or secrets.

SESSION:
{transcript}"""


def _text_blocks(content) -> list[str]:
    if isinstance(content, str):
        return [content]
    if not isinstance(content, list):
        return []
    texts = []
    for block in content:
        if isinstance(block, dict) and block.get('type') == 'text':
            text = block.get('text')
            if isinstance(text, str) and text:
                texts.append(text)
    return texts


def build_transcript_text(path: Path, max_chars: int = MAX_TRANSCRIPT_CHARS) -> str:
    """
    Build a condensed, sanitized transcript for facet extraction.

    Keeps user text, assistant text and tool names. Every line is passed
    through sanitize_content before it is used.
    """
    lines = []
    for record in parse_jsonl(path):
        entry_type = record.get('type')
        message = record.get('message')
        if isinstance(message, str):
            try:
                message = json.loads(message)
            except json.JSONDecodeError:
                message = None
        content = message.get('content') if isinstance(message, dict) else None

        if entry_type == 'user':
            for text in _text_blocks(content):
                lines.append(f"[User]: {text[:500]}")
        elif entry_type == 'assistant':
            for text in _text_blocks(content):
                lines.append(f"[Assistant]: {text[:300]}")
            if isinstance(content, list):
                for block in content:
                    if isinstance(block, dict) and block.get('type') == 'tool_use':
                        lines.append(f"[Tool: {block.get('name', '?')}]")

    transcript = sanitize_content('\n'.join(lines))
    return transcript[:max_chars]


def parse_facet_response(text: str) -> Optional[dict]:
    """
    Parse the model's reply into a facet dict.

    Accepts a bare JSON object or one wrapped in a fenced code block.
    Returns None if no object with goal_categories can be parsed.
    """
    fenced = re.search(r'```(?:json)?\s*(\{.*\})\s*```', text, re.DOTALL)
    candidate = fenced.group(1) if fenced else text.strip()
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict) or not isinstance(data.get('goal_categories'), dict):
        return None
    return data


def extract_facet_with_anthropic(
    transcript: str,
    api_key: Optional[str] = None,
    model: str = DEFAULT_MODEL
) -> Optional[dict]:
    """
    Ask the Anthropic API for a session's facets.

    Args:
        transcript: Sanitized transcript text
        api_key: Anthropic API key (defaults to ANTHROPIC_API_KEY env var)
        model: Model to use for extraction

    Returns:
        Parsed facet dict, or None if the reply could not be parsed
    """
    try:
        import anthropic
    except ImportError:
        raise ImportError(
            "anthropic package not installed. "
            "Install with: pip install 'claude-wrapped[facets]'"
        )

    api_key = api_key or os.environ.get('ANTHROPIC_API_KEY')
    if not api_key:
        raise ValueError(
            "No API key provided. Set ANTHROPIC_API_KEY environment variable "
            "or pass api_key parameter."
        )

    prompt = FACET_PROMPT.format(
        categories=', '.join(GOAL_CATEGORIES),
        transcript=transcript,
    )

    client = anthropic.Anthropic(api_key=api_key)

    response = client.messages.create(
        model=model,
        max_tokens=1024,
        messages=[
            {"role": "user", "content": prompt}
        ]
    )

    return parse_facet_response(response.content[0].text)


def find_pending_sessions(claude_dir: Path, force: bool = False) -> list[tuple[str, Path]]:
    """
    Find transcripts that have no facet file yet.

    The session id is the transcript's file stem. Returns (session_id, path)
    pairs in scan order.
    """
    facets_dir = get_facets_dir(claude_dir)
    pending = []
    seen = set()
    for path in find_jsonl_files(get_projects_dir(claude_dir)):
        session_id = path.stem
        if session_id in seen:
            continue
        seen.add(session_id)
        if not force and (facets_dir / f"{session_id}.json").exists():
            continue
        pending.append((session_id, path))
    return pending


def generate_facets(
    claude_dir: Path,
    model: str = DEFAULT_MODEL,
    limit: Optional[int] = None,
    force: bool = False,
    api_key: Optional[str] = None
) -> list[str]:
    """
    Extract facets for sessions that don't have them and write facet files.

    Args:
        claude_dir: The assistant's configuration directory
        model: Model to use for extraction
        limit: Maximum number of sessions to process
        force: Re-extract sessions that already have a facet file
        api_key: Anthropic API key

    Returns:
        Paths of the facet files written
    """
    facets_dir = get_facets_dir(claude_dir)
    pending = find_pending_sessions(claude_dir, force=force)
    if limit is not None:
        pending = pending[:limit]

    written = []
    for session_id, path in pending:
        transcript = build_transcript_text(path)
        if not transcript.strip():
            continue

        data = extract_facet_with_anthropic(transcript, api_key=api_key, model=model)
        if data is None:
            print(f"Warning: Could not parse facets for session {session_id}", file=sys.stderr)
            continue

        facet = {
            'session_id': session_id,
            'goal_categories': data.get('goal_categories', {}),
            'outcome': data.get('outcome'),
            'friction_counts': data.get('friction_counts', {}),
        }
        content = json.dumps(facet, indent=2)

        is_valid, violations = validate_no_secrets(content)
        if not is_valid:
            print(f"Warning: Facets for session {session_id} contain potential secrets: {violations}", file=sys.stderr)
            continue

        facets_dir.mkdir(parents=True, exist_ok=True)
        output_path = facets_dir / f"{session_id}.json"
        output_path.write_text(content)
        written.append(str(output_path))

    return written
