"""Ordered rewrite stages for converting one note to Wiki.js markdown.

Stages are stateless. Everything that varies per conversion travels in the
``context`` dict handed to every stage:

    page_path   target page path, or None for a preview. Image embeds
                are rewritten to URLs under this path.
"""

from abc import ABC, abstractmethod


class Transform(ABC):
    """One rewrite stage: markdown in, markdown out."""

    @abstractmethod
    def apply(self, content: str, context: dict) -> str:
        ...


class TransformPipeline:
    """Runs stages in list order, each on the previous stage's output.

    Order matters: WikiLinkRewriter has to see ``[[...]]`` before
    ImageEmbedRewriter claims image targets, and CleanupTransform goes last.
    """

    def __init__(self, transforms: list[Transform]) -> None:
        self.transforms = transforms

    def apply(self, content: str, context: dict) -> str:
        for stage in self.transforms:
            content = stage.apply(content, context)
        return content
