"""Front matter removal for daily notes."""

import re

# One block, anchored at the very start: "---", any content, "---", blank lines.
_FM = re.compile(
    r"\A---[ \t]*\r?\n(?:.*?\r?\n)?---[ \t]*(?:\r?\n|\Z)(?:[ \t]*\r?\n)*",
    re.DOTALL,
)


def strip_frontmatter(text: str) -> str:
    """Remove a leading front matter block.

    Only the first block, and only at offset 0, is removed. Text without a
    well-formed block is returned unchanged.

    Examples:
        >>> strip_frontmatter("---\\nkey: v\\n---\\nBody")
        'Body'
        >>> strip_frontmatter("Body\\n---\\nkey: v\\n---\\n")
        'Body\\n---\\nkey: v\\n---\\n'
    """
    m = _FM.match(text)
    if not m:
        return text
    return text[m.end():]
