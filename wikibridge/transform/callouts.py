"""Converts Obsidian callouts (> [!kind] title) into plain blockquotes."""

import re

from .pipeline import Transform

_CALLOUT_RE = re.compile(r"^>\s*\[!(\w+)\]([^\n]*)(?:\n|$)((?:^>.*$\n?)*)", re.MULTILINE)
_QUOTE_PREFIX_RE = re.compile(r"^>[ \t]?", re.MULTILINE)


class CalloutRewriter(Transform):
    def apply(self, content: str, context: dict) -> str:
        return _CALLOUT_RE.sub(_rewrite_callout, content)


def _callout_title(kind: str, raw_title: str) -> str:
    # Foldable callouts carry a +/- marker right after the kind
    title = raw_title.strip().lstrip("+-").strip()
    return title or kind[:1].upper() + kind[1:]


def _rewrite_callout(m: re.Match) -> str:
    title = _callout_title(m.group(1), m.group(2))
    body = _QUOTE_PREFIX_RE.sub("", m.group(3))
    if body.endswith("\n"):
        body = body[:-1]

    header = f"> **{title}**\n"
    if not body:
        return header
    quoted = "\n".join(f"> {line}" if line else ">" for line in body.split("\n"))
    return f"{header}>\n{quoted}\n"
