"""Image reference extraction and ![[embed]] rewriting."""

from __future__ import annotations

import re

from .models import ImageReference
from .paths import asset_filename, image_url, is_external, normalize_image_path
from .pipeline import Transform

IMAGE_EXTENSIONS = (
    "png", "jpg", "jpeg", "gif", "svg", "webp", "bmp",
    "ico", "tiff", "tif", "avif", "heic", "heif",
)
_IMAGE_EXT_RE = re.compile(r"\.(" + "|".join(IMAGE_EXTENSIONS) + r")$", re.IGNORECASE)

_EMBED_RE = re.compile(r"!?\[\[([^\]|]+?)(\|([^\]]+))?\]\]")

# Extraction order is significant: results keep pattern-by-pattern discovery order.
_MARKDOWN_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
_EMBED_PLAIN_RE = re.compile(r"!?\[\[([^\]|]+)\]\]")
_EMBED_CAPTION_RE = re.compile(r"!?\[\[([^\]|]+)\|([^\]]+)\]\]")
_HTML_IMG_RE = re.compile(r"<img[^>]+src=[\"']([^\"']+)[\"'][^>]*>")
_LINK_TITLE_RE = re.compile(r"""\s+(?:"[^"]*"|'[^']*')\s*$""")


def is_image_target(target: str) -> bool:
    return bool(_IMAGE_EXT_RE.search(target.strip()))


def _markdown_target(raw: str) -> str:
    # ![alt](<path with spaces.png> "title")
    raw = _LINK_TITLE_RE.sub("", raw.strip())
    if raw.startswith("<") and raw.endswith(">"):
        raw = raw[1:-1]
    return raw


def _candidate_paths(content: str):
    for m in _MARKDOWN_IMAGE_RE.finditer(content):
        yield _markdown_target(m.group(2))
    for m in _EMBED_PLAIN_RE.finditer(content):
        if is_image_target(m.group(1)):
            yield m.group(1)
    for m in _EMBED_CAPTION_RE.finditer(content):
        if is_image_target(m.group(1)):
            yield m.group(1)
    for m in _HTML_IMG_RE.finditer(content):
        yield m.group(1)


def extract_images(content: str) -> list[ImageReference]:
    """Collect local image references, de-duplicated by normalized path."""
    images: list[ImageReference] = []
    seen: set[str] = set()

    for raw in _candidate_paths(content):
        if is_external(raw.strip()):
            continue
        path = normalize_image_path(raw)
        if not path or path in seen:
            continue
        seen.add(path)
        images.append(ImageReference(name=path.split("/")[-1] or path, path=path))

    return images


class ImageEmbedRewriter(Transform):
    """![[dir/My Pic.PNG|alt]] -> ![alt](/<page_path>/my_pic.png)

    A bare [[pic.png]] with an image target gets the same treatment.
    """

    def apply(self, content: str, context: dict) -> str:
        page_path = context.get("page_path")

        def _rewrite(m: re.Match) -> str:
            target = m.group(1)
            if not is_image_target(target):
                return m.group(0)
            alt = m.group(3) or asset_filename(target)
            return f"![{alt}]({image_url(target, page_path)})"

        return _EMBED_RE.sub(_rewrite, content)
