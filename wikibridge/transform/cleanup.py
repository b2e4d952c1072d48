"""Final pass: strip frontmatter, leftover callout markers and extra blank lines."""

import re

from .pipeline import Transform

_LEADING_FRONTMATTER_RE = re.compile(r"^---\n[\s\S]*?\n---\n")
_EMPTY_CALLOUT_RE = re.compile(r"^>[ \t]*\[![^\]]*\][ \t]*$", re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n{3,}")


class CleanupTransform(Transform):
    def apply(self, content: str, context: dict) -> str:
        content = _LEADING_FRONTMATTER_RE.sub("", content, count=1)
        content = _EMPTY_CALLOUT_RE.sub("", content)
        return _BLANK_RUN_RE.sub("\n\n", content)
