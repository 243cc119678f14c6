"""Line-level Markdown to plain text rewriting for small displays."""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Sequence

from ..core.errors import RenderError

logger = logging.getLogger(__name__)

Replacement = str | Callable[[re.Match[str]], str]


@dataclass(frozen=True)
class RewriteRule:
    """One scan-and-replace pass over a whole line."""
    name: str
    pattern: re.Pattern[str]
    replacement: Replacement

    def apply(self, line: str) -> str:
        return self.pattern.sub(self.replacement, line)


@dataclass(frozen=True)
class RenderResult:
    text: str | None
    error: RenderError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _rule(name: str, pattern: str, replacement: Replacement) -> RewriteRule:
    return RewriteRule(name, re.compile(pattern), replacement)


# Order matters: each rule sees the output of the ones before it.
DEFAULT_RULES: tuple[RewriteRule, ...] = (
    _rule("task-done", r"^\s*[-*+]\s*\[\s*[xX]\s*\]\s*", "☑ "),
    _rule("task-open", r"^\s*[-*+]\s*\[\s*\]\s*", "☐ "),
    _rule("heading", r"^#+\s*", ""),
    # Emphasis markers must hug their text, so "* item *x*" keeps its bullet
    # and snake_case identifiers survive.
    _rule(
        "bold",
        r"\*\*(?!\s)(.+?)(?<!\s)\*\*|(?<!\w)__(?!\s)(.+?)(?<!\s)__(?!\w)",
        r"\1\2",
    ),
    _rule(
        "italic",
        r"\*(?!\s)(.+?)(?<!\s)\*|(?<!\w)_(?!\s)(.+?)(?<!\s)_(?!\w)",
        r"\1\2",
    ),
    _rule("strike", r"~~(.+?)~~", r"\1"),
    _rule("code", r"`(.+?)`", r"\1"),
    _rule("bullet", r"^\s*[-*+]\s+", "• "),
    _rule("numbered", r"^\s*\d+\.\s+", "• "),
    # Images go before links, otherwise "![alt](url)" would leave "!alt".
    _rule("image", r"!\[[^\]]*\]\([^)]*\)", ""),
    _rule("link", r"\[([^\]]+?)\]\([^)]*\)", r"\1"),
    _rule("embed", r"!\[\[.+?\]\]", "[image]"),
    _rule("alias", r"\[\[([^\]|]+?)\|([^\]]+?)\]\]", r"\2"),
    _rule("wikilink", r"\[\[(.+?)\]\]", r"\1"),
    _rule("highlight", r"==(.+?)==", r"\1"),
    _rule("comment", r"%%.*?%%", ""),
    _rule("tag", r"#([\w-]+)", r"\1"),
)


class MarkdownRenderer:
    """
    Rewrites one line of Markdown into one line of plain text.

    ``render`` never raises: if any rule fails, the trimmed original line is
    returned instead. ``try_render`` exposes the failure for callers that care.
    """

    def __init__(self, rules: Sequence[RewriteRule] = DEFAULT_RULES):
        self.rules = tuple(rules)

    def rule(self, name: str) -> RewriteRule:
        for r in self.rules:
            if r.name == name:
                return r
        raise KeyError(name)

    def try_render(self, line: str) -> RenderResult:
        if line.strip() == "---":
            return RenderResult("")

        text = line
        for r in self.rules:
            try:
                text = r.apply(text)
            except Exception as e:
                return RenderResult(None, RenderError(r.name, e))
        return RenderResult(text.strip())

    def render(self, line: str) -> str:
        result = self.try_render(line)
        if result.error is not None:
            logger.debug("Falling back to raw line: %s", result.error)
            return line.strip()
        return result.text or ""
