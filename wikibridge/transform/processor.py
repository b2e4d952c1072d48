"""MarkdownProcessor: converts Obsidian notes to Wiki.js markdown."""

from __future__ import annotations

import logging
import re

from wikibridge.config.models import ConversionConfig

from .callouts import CalloutRewriter
from .cleanup import CleanupTransform
from .hashtags import InlineTagRewriter
from .images import ImageEmbedRewriter, extract_images
from .links import InternalLinkRewriter, WikiLinkRewriter
from .models import ConversionResult
from .paths import strip_date_prefix, strip_note_extension
from .pipeline import Transform, TransformPipeline

logger = logging.getLogger(__name__)

_H1_RE = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)


def extract_title(content: str, file_name: str) -> str:
    """First level-1 heading, else the file name without extension and date prefix."""
    match = _H1_RE.search(content)
    if match:
        return match.group(1).strip()
    return strip_date_prefix(strip_note_extension(file_name))


def build_pipeline(options: ConversionConfig) -> TransformPipeline:
    """Assemble the rewrite stages for the given options.

    WikiLinkRewriter must run before ImageEmbedRewriter: it skips image
    targets so that ![[pic.png]] reaches the image stage untouched.
    """
    transforms: list[Transform] = []
    if not options.preserve_native_syntax:
        transforms += [
            WikiLinkRewriter(),
            ImageEmbedRewriter(),
            InlineTagRewriter(),
            CalloutRewriter(),
        ]
    if options.auto_convert_links:
        transforms.append(InternalLinkRewriter())
    transforms.append(CleanupTransform())
    return TransformPipeline(transforms)


class MarkdownProcessor:
    def __init__(self, options: ConversionConfig | None = None) -> None:
        self.options = options or ConversionConfig()
        self.pipeline = build_pipeline(self.options)

    def process(self, content: str, file_name: str, page_path: str | None = None) -> ConversionResult:
        """Convert a note. Pure: identical inputs always give identical output."""
        title = extract_title(content, file_name)
        # Run against the untouched text so later rewrites cannot hide references
        images = extract_images(content)
        logger.debug("Extracted %d image reference(s) from %s", len(images), file_name)

        converted = self.pipeline.apply(content, {"page_path": page_path})
        return ConversionResult(content=converted.strip(), title=title, images=images)
