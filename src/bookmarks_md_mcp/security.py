"""Security utilities: path validation, openable links, secrets in bookmark targets."""

import re
from pathlib import Path
from urllib.parse import urlsplit

# URI schemes that may be handed to the system browser
OPENABLE_SCHEMES = {'http', 'https', 'mailto', 'ftp'}

# Regex patterns to detect secrets embedded in link targets
SECRET_LINK_PATTERNS = [
    (re.compile(r'AKIA[0-9A-Z]{16}'), 'AWS access key'),
    (re.compile(r'sk-ant-[a-zA-Z0-9_-]+'), 'Anthropic API key'),
    (re.compile(r'ghp_[a-zA-Z0-9]{36}'), 'GitHub personal access token'),
    (re.compile(r'glpat-[a-zA-Z0-9\-_]{20,}'), 'GitLab personal access token'),
    (re.compile(r'xox[boaprs]-[a-zA-Z0-9\-]+'), 'Slack token'),
    (re.compile(r'[?&](?:access_token|api_key|apikey|token|secret|password)=[^&#]+', re.IGNORECASE),
     'credential query parameter'),
]


def validate_path_traversal(resolved_path: Path, base_path: Path) -> bool:
    """Check that a resolved path is within the base directory (no traversal/symlink escape)."""
    try:
        resolved_path.relative_to(base_path)
        return True
    except ValueError:
        return False


def is_openable_link(url: str) -> bool:
    """Check that a URL uses a scheme we are willing to open externally."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    if parts.scheme.lower() not in OPENABLE_SCHEMES:
        return False
    if parts.scheme.lower() == 'mailto':
        return bool(parts.path)
    return bool(parts.netloc)


def scan_link_for_secrets(url: str) -> list[str]:
    """Scan a bookmark target for embedded credentials. Returns list of detected secret types."""
    detected = []
    try:
        if urlsplit(url).password:
            detected.append('password in URL')
    except ValueError:
        pass
    for pattern, description in SECRET_LINK_PATTERNS:
        if pattern.search(url):
            detected.append(description)
    return detected
