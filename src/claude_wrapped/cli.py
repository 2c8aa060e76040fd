"""CLI entry point for claude-wrapped."""

import sys
import json
from pathlib import Path
from datetime import timezone

import click

from .facets import DEFAULT_MODEL
from .paths import get_default_claude_dir


def resolve_claude_dir(claude_dir) -> Path:
    """Resolve --claude-dir, exiting if the directory doesn't exist."""
    claude_path = Path(claude_dir) if claude_dir else get_default_claude_dir()
    if not claude_path.is_dir():
        click.echo(f"Error: Claude directory not found: {claude_path}", err=True)
        sys.exit(1)
    return claude_path


@click.group()
@click.version_option(package_name="claude-wrapped")
def main():
    """Claude Wrapped - usage statistics and archetype from local Claude Code logs."""
    pass


@main.command()
@click.option("--claude-dir", default=None, help="Path to the Claude config directory (default: ~/.claude)")
@click.option("--utc", is_flag=True, help="Bucket activity by UTC instead of local time")
@click.option("--verbose", "-v", is_flag=True, help="Print progress and skipped records to stderr")
@click.option("--output", "-o", default=None, help="Write the JSON summary to a file instead of stdout")
def extract(claude_dir, utc, verbose, output):
    """Compute the summary and print it as JSON."""
    from .summary import build_summary
    from .sanitize import validate_summary_privacy

    claude_path = resolve_claude_dir(claude_dir)

    if verbose:
        click.echo("Generating your Claude Code Wrapped...", err=True)

    summary = build_summary(claude_path, tz=timezone.utc if utc else None, verbose=verbose)
    payload = summary.to_dict()

    # Unsafe labels are dropped while reading, so this only reports
    _, violations = validate_summary_privacy(payload)
    for violation in violations:
        click.echo(f"Warning: Privacy check: {violation}", err=True)

    text = json.dumps(payload, indent=2)
    if output:
        Path(output).write_text(text + '\n')
        click.echo(f"Wrote summary to {output}", err=True)
    else:
        click.echo(text)


@main.command()
@click.option("--claude-dir", default=None, help="Path to the Claude config directory (default: ~/.claude)")
@click.option("--utc", is_flag=True, help="Bucket activity by UTC instead of local time")
def report(claude_dir, utc):
    """Print a human-readable summary."""
    from .summary import build_summary, format_summary_report

    claude_path = resolve_claude_dir(claude_dir)
    summary = build_summary(claude_path, tz=timezone.utc if utc else None)
    click.echo(format_summary_report(summary))


@main.command()
@click.option("--claude-dir", default=None, help="Path to the Claude config directory (default: ~/.claude)")
@click.option("--model", default=DEFAULT_MODEL, help="Model to use for facet extraction")
@click.option("--limit", type=int, default=None, help="Maximum number of sessions to process")
@click.option("--force", is_flag=True, help="Re-extract sessions that already have facets")
@click.option("--dry-run", is_flag=True, help="List sessions that would be processed")
def facets(claude_dir, model, limit, force, dry_run):
    """Extract goal facets for sessions with an LLM (requires anthropic).

    Sanitized transcript excerpts are sent to the Anthropic API using
    ANTHROPIC_API_KEY. The resulting facet files are added to goal counts
    by later extract/report runs.
    """
    from .facets import find_pending_sessions, generate_facets

    claude_path = resolve_claude_dir(claude_dir)

    if dry_run:
        pending = find_pending_sessions(claude_path, force=force)
        if limit is not None:
            pending = pending[:limit]
        for session_id, _ in pending:
            click.echo(f"Would extract: {session_id}")
        click.echo(f"{len(pending)} sessions pending")
        return

    try:
        written = generate_facets(claude_path, model=model, limit=limit, force=force)
    except ImportError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for path in written:
        click.echo(f"Created: {path}")
    click.echo(f"Wrote {len(written)} facet files")


if __name__ == "__main__":
    main()
