"""
Street address normalization.

nic.at accepts at most three <contact:street> lines of at most 35 characters
each. Longer input is reflowed word by word to fit.
"""

from typing import List, Optional, Sequence

MAX_STREET_LINES = 3
MAX_STREET_LINE_LENGTH = 35


def fits_street_limits(
    lines: Sequence[str],
    max_lines: int = MAX_STREET_LINES,
    max_length: int = MAX_STREET_LINE_LENGTH,
) -> bool:
    """Check line count and per-line length (in code points)."""
    return len(lines) <= max_lines and all(len(line) <= max_length for line in lines)


def normalize_street(
    lines: Optional[Sequence[str]],
    max_lines: int = MAX_STREET_LINES,
    max_length: int = MAX_STREET_LINE_LENGTH,
) -> Optional[List[str]]:
    """
    Reflow street lines into at most `max_lines` lines of `max_length` chars.

    Lengths are counted in code points (Python str length), not bytes.
    Input that already fits is returned unchanged. Otherwise all lines are
    split into words and greedily packed; a word longer than `max_length`
    is truncated. When packing yields too many lines, everything from the
    last permitted line onward is joined into that line and truncated.

    Args:
        lines: Street lines, or None when the field is absent

    Returns:
        New list of lines, or None if `lines` is None
    """
    if lines is None:
        return None

    if fits_street_limits(lines, max_lines, max_length):
        return list(lines)

    words = [word for line in lines for word in line.split()]

    packed: List[str] = []
    current = ""
    for word in words:
        word = word[:max_length]
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= max_length:
            current = f"{current} {word}"
        else:
            packed.append(current)
            current = word
    if current:
        packed.append(current)

    if len(packed) > max_lines:
        overflow = " ".join(packed[max_lines - 1:])
        packed = packed[:max_lines - 1] + [overflow[:max_length].rstrip()]

    return packed
