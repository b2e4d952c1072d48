"""Tag extraction from YAML frontmatter and inline #hashtags."""

from __future__ import annotations

import re

import yaml

FRONTMATTER_RE = re.compile(r"^---\n(.*?)\n---", re.DOTALL)
INLINE_TAG_RE = re.compile(r"(^|\s)#([a-zA-Z0-9_/-]+)")
_TAGS_LINE_RE = re.compile(r"^tags:[ \t]*(.*?)[ \t]*$", re.MULTILINE)


def split_frontmatter(content: str) -> tuple[str | None, str]:
    """Split note content into raw frontmatter text and body.

    Returns (frontmatter, body). frontmatter is None if the note has none.
    """
    match = FRONTMATTER_RE.match(content)
    if not match:
        return None, content
    body = content[match.end():]
    if body.startswith("\n"):
        body = body[1:]
    return match.group(1), body


def extract_tags(content: str) -> list[str]:
    """Collect tags: frontmatter first, then inline hashtags in document order."""
    frontmatter, body = split_frontmatter(content)

    tags: list[str] = []
    if frontmatter is not None:
        for tag in _frontmatter_tags(frontmatter):
            if tag and tag not in tags:
                tags.append(tag)

    for match in INLINE_TAG_RE.finditer(body):
        tag = match.group(2)
        if tag not in tags:
            tags.append(tag)

    return tags


def _frontmatter_tags(frontmatter: str) -> list[str]:
    line = _TAGS_LINE_RE.search(frontmatter)
    if line is None:
        return []

    value = line.group(1)
    if not value:
        return _block_list_tags(frontmatter)

    if value.startswith("[") and value.endswith("]"):
        value = value[1:-1]
    return [part.strip().strip("\"'").strip() for part in value.split(",")]


def _block_list_tags(frontmatter: str) -> list[str]:
    """Handle the YAML block-list form (tags:\\n  - a\\n  - b)."""
    try:
        data = yaml.safe_load(frontmatter)
    except yaml.YAMLError:
        return []
    if not isinstance(data, dict):
        return []
    raw = data.get("tags")
    if not isinstance(raw, list):
        return []
    return [str(item).strip() for item in raw if item is not None]
