"""File-name sanitization."""
import re

# Characters rejected by at least one of the filesystems Plex libraries live on.
_INVALID_CHARS = re.compile(r'[/:\\?%*|"<>]')


def sanitize(name: str) -> str:
    """
    Remove characters that are invalid in file names.

    Every invalid character is replaced by a space, runs of whitespace are
    collapsed to one space, and the result is trimmed. The function is
    idempotent.

    Args:
        name: The name to sanitize

    Returns:
        Sanitized name safe for use as a file or folder name
    """
    sanitized = _INVALID_CHARS.sub(' ', name)
    sanitized = re.sub(r'\s+', ' ', sanitized)
    return sanitized.strip()
