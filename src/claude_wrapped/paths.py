"""Locations of the assistant's log files."""

import os
from pathlib import Path


HISTORY_FILE = 'history.jsonl'
PROJECTS_DIR = 'projects'
FACETS_DIR = Path('usage-data') / 'facets'

# Directory names never descended into while scanning for transcripts
SKIPPED_DIRS = frozenset({'node_modules'})


def get_default_claude_dir() -> Path:
    """Get the assistant's configuration directory.

    Returns:
        $CLAUDE_CONFIG_DIR if set, otherwise ~/.claude
    """
    override = os.environ.get('CLAUDE_CONFIG_DIR')
    if override:
        return Path(override).expanduser()
    return Path.home() / '.claude'


def get_history_path(claude_dir: Path) -> Path:
    return claude_dir / HISTORY_FILE


def get_projects_dir(claude_dir: Path) -> Path:
    return claude_dir / PROJECTS_DIR


def get_facets_dir(claude_dir: Path) -> Path:
    return claude_dir / FACETS_DIR
