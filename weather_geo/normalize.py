"""
Query normalizer: punctuation, whitespace and abbreviation cleanup.

The output is a fixed point: normalize_query(normalize_query(s)) == normalize_query(s).
"""

from __future__ import annotations

import re

# Ordered whole-word substitutions. No replacement value is itself a key that
# maps to something else, so a second pass changes nothing.
QUERY_SUBSTITUTIONS: tuple[tuple[str, str], ...] = (
    ("united states of america", "US"),
    ("united states", "US"),
    ("usa", "US"),
    ("us", "US"),
    ("united kingdom", "GB"),
    ("great britain", "GB"),
    ("britain", "GB"),
    ("england", "GB"),
    ("uk", "GB"),
    ("gb", "GB"),
    ("jpn", "Japan"),
    ("jp", "Japan"),
    ("deutschland", "Germany"),
    ("ger", "Germany"),
    ("aus", "Australia"),
    ("md", "Maryland"),
    ("ca", "California"),
    ("nyc", "New York"),
    ("d.c.", "DC"),
)

_SUBSTITUTION_LOOKUP = {key: value for key, value in QUERY_SUBSTITUTIONS}

_SUBSTITUTION_RE = re.compile(
    r"(?<!\w)(?:"
    + "|".join(re.escape(key) for key, _ in sorted(QUERY_SUBSTITUTIONS, key=lambda kv: -len(kv[0])))
    + r")(?!\w)",
    re.IGNORECASE,
)

_QUOTES_RE = re.compile(r"[‘’‚‛“”„‟\"`´′]")
_WHITESPACE_RE = re.compile(r"\s+")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+(?=[,.])")
_REPEATED_PERIODS_RE = re.compile(r"\.{2,}")
_REPEATED_COMMAS_RE = re.compile(r",{2,}")
_SPACE_AFTER_COMMA_RE = re.compile(r",\s*(?=[^\s,.])")
_SPACE_AFTER_PERIOD_RE = re.compile(r"\.\s+")


def _substitute(match: re.Match) -> str:
    return _SUBSTITUTION_LOOKUP[match.group(0).lower()]


def normalize_query(text) -> str:
    """Clean up a raw location query. Non-string input gives ''."""
    if not isinstance(text, str):
        return ""

    result = _WHITESPACE_RE.sub(" ", text).strip()
    if not result:
        return ""

    result = _QUOTES_RE.sub("'", result)
    result = _SPACE_BEFORE_PUNCT_RE.sub("", result)
    result = _REPEATED_PERIODS_RE.sub(".", result)
    result = _REPEATED_COMMAS_RE.sub(",", result)
    result = _SPACE_AFTER_COMMA_RE.sub(", ", result)
    # "d.c." keeps its dots; only existing gaps after a period are squeezed
    result = _SPACE_AFTER_PERIOD_RE.sub(". ", result)

    result = _SUBSTITUTION_RE.sub(_substitute, result)

    return result.strip(" ,").strip()
