"""Hard word wrapping for narrow displays."""

import unicodedata


def _is_high_surrogate(ch: str) -> bool:
    return "\ud800" <= ch <= "\udbff"


def _safe_cut(text: str, cut: int) -> int:
    """Move cut left so it never separates a character from its tail.

    Covers surrogate pairs (text decoded with ``surrogatepass``) and
    combining marks following their base character.
    """
    adjusted = cut
    if adjusted > 0 and _is_high_surrogate(text[adjusted - 1]):
        adjusted -= 1
    while 0 < adjusted < len(text) and unicodedata.combining(text[adjusted]):
        adjusted -= 1
    # A run made only of marks cannot be kept whole; fall back to the raw cut.
    return adjusted if adjusted > 0 else cut


def wrap_line(line: str, max_chars: int) -> list[str]:
    """Split line into pieces of at most max_chars characters.

    Breaks at the last space at or before max_chars; a token longer than
    max_chars is cut at max_chars. Spaces at a break are dropped. A
    non-positive max_chars disables wrapping.

    Examples:
        >>> wrap_line("the quick brown fox", 10)
        ['the quick', 'brown fox']
        >>> wrap_line("abcdefghij", 4)
        ['abcd', 'efgh', 'ij']
    """
    if max_chars <= 0:
        return [line]

    pieces: list[str] = []
    rest = line
    while len(rest) > max_chars:
        cut = rest.rfind(" ", 0, max_chars + 1)
        if cut <= 0:
            cut = max_chars
        cut = _safe_cut(rest, cut)

        piece = rest[:cut].rstrip(" ")
        if piece:
            pieces.append(piece)
        rest = rest[cut:].lstrip(" ")

    if rest.strip():
        pieces.append(rest)
    return pieces
