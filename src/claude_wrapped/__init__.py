"""Claude Wrapped - local usage statistics and archetype scoring for Claude Code logs."""

__version__ = "0.1.0"
