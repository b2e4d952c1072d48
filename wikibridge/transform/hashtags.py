"""Wraps inline #tags in code spans so Wiki.js does not read them as headings."""

from .pipeline import Transform
from .tags import INLINE_TAG_RE


class InlineTagRewriter(Transform):
    def apply(self, content: str, context: dict) -> str:
        return INLINE_TAG_RE.sub(r"\1`#\2`", content)
