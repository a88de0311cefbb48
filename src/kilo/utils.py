"""Display-width helpers for status and message bar text.

Document rows are drawn one character per column, exactly as their rendered
form is laid out.  The bars, however, carry free-form text (file names,
messages) whose terminal width is measured by grapheme cluster.
"""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Control characters and lone combining marks are zero width, emoji
    clusters are two columns, everything else is delegated to wcwidth.
    """
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        # Lone surrogates stand in for undecodable file bytes.
        if 0xD800 <= cp <= 0xDFFF:
            return 1
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2

    cat = unicodedata.category(first)
    if cat.startswith("M") or cat == "Cf":
        return 0
    return max(_wcwidth.wcwidth(first), 0)


# ---------------------------------------------------------------------------
# visible_width / truncate_to_width
# ---------------------------------------------------------------------------


def visible_width(text: str) -> int:
    """Calculate the number of terminal columns *text* occupies."""
    if not text:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in text):
        return len(text)

    cached = _width_cache.get(text)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(text))
    return _cache_width(text, total)


def truncate_to_width(text: str, max_width: int) -> str:
    """Return the longest prefix of *text* that fits in *max_width* columns.

    The text is cut at grapheme boundaries; nothing is appended.
    """
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text

    result: list[str] = []
    cols = 0
    for g in grapheme.graphemes(text):
        w = _grapheme_width(g)
        if cols + w > max_width:
            break
        result.append(g)
        cols += w
    return "".join(result)
