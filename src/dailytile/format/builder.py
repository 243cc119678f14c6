"""Build the full text and the tile excerpt of a daily note."""

from dataclasses import dataclass

from ..core.model import Document, RenderedNote
from .fm import strip_frontmatter
from .markdown import MarkdownRenderer
from .wrap import wrap_line


@dataclass(frozen=True)
class ExcerptPreset:
    """Display budget for the excerpt."""
    name: str
    lines: int
    max_chars: int = 0  # 0 disables wrapping


TILE_PRESET = ExcerptPreset(name="tile", lines=9, max_chars=30)
FULL_PRESET = ExcerptPreset(name="full", lines=12, max_chars=0)

PRESETS = {p.name: p for p in (TILE_PRESET, FULL_PRESET)}


class NoteTextBuilder:
    def __init__(
        self,
        renderer: MarkdownRenderer | None = None,
        preset: ExcerptPreset = TILE_PRESET,
    ):
        self.renderer = renderer or MarkdownRenderer()
        self.preset = preset

    def excerpt_lines(self, text: str) -> list[str]:
        """Rendered, non-blank, wrapped lines of text, most recent last."""
        lines: list[str] = []
        for raw in text.splitlines():
            rendered = self.renderer.render(raw)
            if not rendered.strip():
                continue
            lines.extend(wrap_line(rendered, self.preset.max_chars))

        if self.preset.lines <= 0:
            return []
        return lines[-self.preset.lines:]

    def excerpt(self, text: str) -> str:
        return "\n".join(self.excerpt_lines(text))

    def build(self, document: Document) -> RenderedNote:
        full_text = strip_frontmatter(document.raw)
        return RenderedNote(
            date=document.date,
            full_text=full_text,
            excerpt=self.excerpt(full_text),
        )
