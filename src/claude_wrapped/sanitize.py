"""Privacy checks for the summary and secret redaction for transcript text.

The summary leaves the machine, so it may only carry counts, category labels
and short derived strings. Transcript text sent to an LLM for facet
extraction is redacted first.
"""

import re
from typing import Iterable, List, Optional, Tuple

from .sessions import normalize_project_name


# =============================================================================
# Secret Detection Patterns
# =============================================================================

# Order matters: specific formats before generic ones
SECRET_PATTERNS = [
    # --- LLM Providers ---
    (r'sk-ant-[a-zA-Z0-9\-_]{32,}', 'ANTHROPIC-API-KEY'),
    (r'sk-or-[a-zA-Z0-9]{32,}', 'OPENROUTER-API-KEY'),
    (r'sk-(?:proj-)?[a-zA-Z0-9]{30,}', 'OPENAI-API-KEY'),

    # --- GitHub ---
    (r'gh[pousr]_[A-Za-z0-9]{20,}', 'GITHUB-TOKEN'),
    (r'github_pat_[A-Za-z0-9_]{22,}', 'GITHUB-PAT'),

    # --- AWS ---
    (r'AKIA[A-Z0-9]{16}', 'AWS-ACCESS-KEY'),
    (r'ASIA[A-Z0-9]{16}', 'AWS-SESSION-KEY'),

    # --- Chat / Payment / Cloud ---
    (r'xox[baprs]-[0-9]{10,13}-[0-9]{10,13}[a-zA-Z0-9-]*', 'SLACK-TOKEN'),
    (r'sk_(?:live|test)_[0-9a-zA-Z]{24,}', 'STRIPE-KEY'),
    (r'AIza[0-9A-Za-z_-]{35}', 'GOOGLE-API-KEY'),

    # --- Structural ---
    (r'eyJ[a-zA-Z0-9_-]{5,}\.[a-zA-Z0-9_-]{5,}\.[a-zA-Z0-9_-]{5,}', 'JWT'),
    (r'-----BEGIN (?:RSA |DSA |EC |OPENSSH )?PRIVATE KEY-----', 'SSH-PRIVATE-KEY'),
    (r'\w+://[^:@\s/]+:[^@\s]+@\S+', 'CONNECTION-STRING'),
    (r'\b[A-Za-z0-9+/]{40,}={0,2}', 'BASE64'),
]

# key=value assignments: the key is kept, the value redacted
ASSIGNMENT_PATTERNS = [
    (r'(?i)(\w*(?:api[_-]?key|secret|token|password|passwd)\w*)\s*[=:]\s*["\']?(?!\[REDACTED)([^\s"\'\[]{8,})["\']?', 'VALUE', '='),
    (r'(?i)(bearer\s+)(?!\[REDACTED)([^\s"\'\[]{16,})', 'BEARER-TOKEN', ''),
]

# Summary strings longer than this are not labels
MAX_LABEL_LENGTH = 80

# Transcript directories are named after the project path with every
# non-alphanumeric character replaced by "-"
PATH_ENCODING_PATTERN = re.compile(r'[^A-Za-z0-9]')


# =============================================================================
# Content Sanitization
# =============================================================================

def sanitize_content(content: str) -> str:
    """
    Replace detected secrets with [REDACTED-TYPE] placeholders.

    Idempotent: sanitizing already sanitized text changes nothing.
    """
    sanitized = content

    for pattern, redaction_type in SECRET_PATTERNS:
        sanitized = re.sub(pattern, f"[REDACTED-{redaction_type}]", sanitized)

    for pattern, redaction_type, separator in ASSIGNMENT_PATTERNS:
        sanitized = re.sub(pattern, f"\\1{separator}[REDACTED-{redaction_type}]", sanitized)

    return sanitized


def validate_no_secrets(content: str) -> Tuple[bool, List[str]]:
    """
    Validate that content contains no unredacted secrets.

    Returns:
        Tuple of (is_valid, list_of_violations). Violations name the kind of
        secret, never its value.
    """
    violations = []
    for pattern, redaction_type in SECRET_PATTERNS:
        for match in re.finditer(pattern, content):
            if 'REDACTED' not in match.group(0):
                violations.append(f"Found potential {redaction_type}")
                break
    return (len(violations) == 0, violations)


# =============================================================================
# Summary Validation
# =============================================================================

def is_safe_label(text: str) -> bool:
    """Check that text is a short label: no path separators, no secrets."""
    if '/' in text or '\\' in text or len(text) > MAX_LABEL_LENGTH:
        return False
    return validate_no_secrets(text)[0]


def encode_project_path(project_path: str) -> str:
    """Encode a project path the way its transcript directory is named."""
    return PATH_ENCODING_PATTERN.sub('-', project_path.rstrip('/\\'))


def project_display_name(project_dir: str, project_paths: Iterable[str]) -> Optional[str]:
    """
    Resolve an encoded transcript directory to its project's final path segment.

    The encoding is lossy, so the name is looked up among the project paths
    recorded in history rather than recovered from the directory name. Returns
    None when no recorded path matches or its name is not a safe label.
    """
    for project_path in sorted(set(project_paths)):
        if encode_project_path(project_path) != project_dir:
            continue
        name = normalize_project_name(project_path)
        if name and is_safe_label(name):
            return name
    return None


def _walk_strings(value, where: str):
    """Yield (location, string) for every key and string value in a payload."""
    if isinstance(value, str):
        yield where, value
    elif isinstance(value, dict):
        for key, item in value.items():
            yield f"{where}.<key>", str(key)
            yield from _walk_strings(item, f"{where}.{key}")
    elif isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            yield from _walk_strings(item, f"{where}[{i}]")


def validate_summary_privacy(payload: dict) -> Tuple[bool, List[str]]:
    """
    Check a rendered summary for anything that is not a short label.

    Flags strings that contain path separators, exceed MAX_LABEL_LENGTH or
    look like secrets. Violation messages give the location, not the value.

    Returns:
        Tuple of (is_valid, list_of_violations)
    """
    violations = []
    for where, text in _walk_strings(payload, 'summary'):
        if '/' in text or '\\' in text:
            violations.append(f"{where}: contains a path separator")
        elif len(text) > MAX_LABEL_LENGTH:
            violations.append(f"{where}: longer than {MAX_LABEL_LENGTH} characters")
        else:
            is_valid, secrets = validate_no_secrets(text)
            if not is_valid:
                violations.append(f"{where}: {secrets[0].lower()}")
    return (len(violations) == 0, violations)
