"""Transform pipeline for converting Obsidian notes to Wiki.js markdown."""

from .pipeline import Transform, TransformPipeline
from .links import InternalLinkRewriter, WikiLinkRewriter
from .images import ImageEmbedRewriter, extract_images, is_image_target
from .hashtags import InlineTagRewriter
from .callouts import CalloutRewriter
from .cleanup import CleanupTransform
from .models import ConversionResult, ImageReference
from .paths import generate_path, image_url, normalize_image_path
from .tags import extract_tags, split_frontmatter
from .processor import MarkdownProcessor, build_pipeline, extract_title

__all__ = [
    "Transform",
    "TransformPipeline",
    "WikiLinkRewriter",
    "InternalLinkRewriter",
    "ImageEmbedRewriter",
    "InlineTagRewriter",
    "CalloutRewriter",
    "CleanupTransform",
    "ConversionResult",
    "ImageReference",
    "MarkdownProcessor",
    "build_pipeline",
    "extract_images",
    "extract_tags",
    "extract_title",
    "generate_path",
    "image_url",
    "is_image_target",
    "normalize_image_path",
    "split_frontmatter",
]
