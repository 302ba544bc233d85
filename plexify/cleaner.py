"""Cleanup of episode titles taken from scene-release filenames.

The *parser* module finds the season / episode / air-date markers; whatever
text follows a marker goes through ``clean_episode_title`` before it is
used as an episode title.
"""

import re

# ---------------------------------------------------------------------------
# Pattern groups
# ---------------------------------------------------------------------------

# Separators used instead of spaces in release names
_SEPARATORS = re.compile(r' - |[-_.]')

# Bracketed content  [anything]
_BRACKETS = re.compile(r'\[[^\]]+\]')

# Parenthesised content  (anything)
_PARENS = re.compile(r'\([^)]+\)')

# Release-quality tokens.  Hyphenated tokens also match once the hyphen has
# been turned into a space by the separator pass.
RELEASE_TOKENS = (
    "1080p", "2160p", "720p", "4k", "uhd", "hdr", "dv",
    "webrip", "web-dl", "bluray", "remux", "x264", "x265",
    "h264", "h265", "hevc", "aac", "ddp", "atmos",
)

_RELEASE_TOKENS = re.compile(
    r'\b(?:'
    + '|'.join(re.escape(token).replace(r'\-', '[- ]') for token in RELEASE_TOKENS)
    + r')\b',
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def clean_episode_title(raw: str | None) -> str | None:
    """Turn the text following an episode marker into a readable title.

    Parameters
    ----------
    raw:
        Text after the ``s01e01`` / number / date marker, e.g.
        ``".The.Pilot.1080p.WEB-DL[rarbg]"``.

    Returns
    -------
    str or None
        ``"The Pilot"`` for the example above; *None* when nothing but
        separators and release noise was left.
    """
    if not raw:
        return None

    cleaned = _SEPARATORS.sub(' ', raw)
    cleaned = _BRACKETS.sub('', cleaned)
    cleaned = _PARENS.sub('', cleaned)
    cleaned = _RELEASE_TOKENS.sub('', cleaned)
    cleaned = re.sub(r'\s{2,}', ' ', cleaned).strip()

    return cleaned or None
