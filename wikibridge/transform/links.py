"""Rewrites [[wikilinks]] and relative markdown links to Wiki.js paths."""

import re

from .images import is_image_target
from .pipeline import Transform

_WIKILINK_RE = re.compile(r"(?<!!)\[\[([^\]|]+)(\|([^\]]+))?\]\]")
_MD_LINK_RE = re.compile(r"\[([^\]]+)\]\((?!https?://)([^)]+)\)")
# mailto:, data:, ftp: ... anything carrying its own scheme is left alone
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


class WikiLinkRewriter(Transform):
    """[[Target|Label]] -> [Label](/target).

    Image targets are left for ImageEmbedRewriter. Note embeds (![[Note]])
    are not links and stay as written.
    """

    def apply(self, content: str, context: dict) -> str:
        return _WIKILINK_RE.sub(_rewrite_wikilink, content)


def _rewrite_wikilink(m: re.Match) -> str:
    target = m.group(1)
    if is_image_target(target):
        return m.group(0)
    label = m.group(3) or target
    url = re.sub(r"\s+", "-", target).lower()
    return f"[{label}](/{url})"


class InternalLinkRewriter(Transform):
    """Makes relative link targets root-relative by prefixing a single '/'."""

    def apply(self, content: str, context: dict) -> str:
        return _MD_LINK_RE.sub(_rewrite_internal, content)


def _rewrite_internal(m: re.Match) -> str:
    url = m.group(2)
    if url.startswith(("/", "#")) or _SCHEME_RE.match(url):
        return m.group(0)
    return f"[{m.group(1)}](/{url})"
