"""Text preparation for the small-screen views of a daily note."""

from .builder import FULL_PRESET, PRESETS, TILE_PRESET, ExcerptPreset, NoteTextBuilder
from .fm import strip_frontmatter
from .markdown import DEFAULT_RULES, MarkdownRenderer, RewriteRule
from .wrap import wrap_line

__all__ = [
    "strip_frontmatter",
    "wrap_line",
    "MarkdownRenderer",
    "RewriteRule",
    "DEFAULT_RULES",
    "NoteTextBuilder",
    "ExcerptPreset",
    "TILE_PRESET",
    "FULL_PRESET",
    "PRESETS",
]
