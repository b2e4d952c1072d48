"""ImageResolver: maps image references in a note to concrete vault files.

A reference like ``pic.png`` or ``../assets/pic.png`` can mean several
things depending on how the note was written and how the vault stores
attachments. Resolution runs an ordered chain of strategies; the first one
that finds a file wins.
"""

from __future__ import annotations

import logging
import posixpath
from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from wikibridge.transform.models import ImageReference
from wikibridge.transform.paths import is_external
from wikibridge.vault.base import Vault, VaultError, VaultFile, join_path

logger = logging.getLogger(__name__)

# Conventional attachment folder names, next to the note and at the vault root
SIBLING_ATTACHMENT_DIRS = ("attachments", "assets", "images", "media", "files")
ROOT_ATTACHMENT_DIRS = ("attachments", "assets", "images")

# Tried in order when a reference has no extension at all
SEARCH_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".bmp", ".excalidraw")


class ResolutionReport(BaseModel):
    """Outcome of resolving a batch of image references."""

    files: dict[str, VaultFile] = Field(
        default_factory=dict, description="reference path -> resolved file"
    )
    unresolved: list[ImageReference] = Field(default_factory=list)


class ResolveStrategy(ABC):
    name: str = "strategy"

    @abstractmethod
    def find(self, path: str, source: VaultFile, vault: Vault) -> VaultFile | None:
        ...


class LinkStrategy(ResolveStrategy):
    """Host link resolution, relative to the source note."""

    name = "link"

    def find(self, path: str, source: VaultFile, vault: Vault) -> VaultFile | None:
        return vault.resolve_link(path, source.path)


class AbsolutePathStrategy(ResolveStrategy):
    """Reference is already a vault path (optionally with a leading slash)."""

    name = "absolute"

    def find(self, path: str, source: VaultFile, vault: Vault) -> VaultFile | None:
        normalized = join_path(path)
        return vault.get_file(normalized) if normalized else None


class RelativePathStrategy(ResolveStrategy):
    """Reference is relative to the note's folder (./x, x, ../x)."""

    name = "relative"

    def find(self, path: str, source: VaultFile, vault: Vault) -> VaultFile | None:
        if path.startswith("../"):
            return self._walk(path, source.parent, vault)
        relative = path[2:] if path.startswith("./") else path
        return vault.get_file(join_path(source.parent, relative))

    @staticmethod
    def _walk(path: str, start: str, vault: Vault) -> VaultFile | None:
        current = start
        for part in path.split("/"):
            if part == "..":
                if not current:
                    # Already at the vault root; nowhere left to climb
                    return None
                current = posixpath.dirname(current)
            elif part not in (".", ""):
                current = f"{current}/{part}" if current else part
        return vault.get_file(current)


class AttachmentFolderStrategy(ResolveStrategy):
    """Reference lives in the vault's attachment folder."""

    name = "attachment-folder"

    def find(self, path: str, source: VaultFile, vault: Vault) -> VaultFile | None:
        folder = detect_attachment_folder(source, vault)
        if folder is None:
            return None
        return vault.get_file(join_path(folder, path))


class FilenameSearchStrategy(ResolveStrategy):
    """Last resort: match the bare file name anywhere in the vault."""

    name = "filename-search"

    def find(self, path: str, source: VaultFile, vault: Vault) -> VaultFile | None:
        file_name = path.split("/")[-1]
        if not file_name:
            return None
        if "." in file_name:
            names = [file_name]
        else:
            names = [f"{file_name}{ext}" for ext in SEARCH_EXTENSIONS]

        all_files = vault.list_files()
        for name in names:
            for f in all_files:
                if f.name == name and f.parent == source.parent:
                    return f
        for name in names:
            for f in all_files:
                if f.name == name:
                    return f
        return None


def detect_attachment_folder(source: VaultFile, vault: Vault) -> str | None:
    """Find the attachment folder for a note: beside it first, then at the root."""
    for folder_name in SIBLING_ATTACHMENT_DIRS:
        folder = join_path(source.parent, folder_name)
        if vault.is_folder(folder):
            return folder
    for folder_name in ROOT_ATTACHMENT_DIRS:
        if vault.is_folder(folder_name):
            return folder_name
    return None


def default_strategies() -> list[ResolveStrategy]:
    return [
        LinkStrategy(),
        AbsolutePathStrategy(),
        RelativePathStrategy(),
        AttachmentFolderStrategy(),
        FilenameSearchStrategy(),
    ]


class ImageResolver:
    def __init__(self, vault: Vault, strategies: list[ResolveStrategy] | None = None):
        self.vault = vault
        self.strategies = strategies if strategies is not None else default_strategies()

    def resolve(self, image_path: str, source: VaultFile) -> VaultFile | None:
        """Locate the file behind one image reference, or None."""
        clean = image_path.split("?")[0].split("#")[0].strip()
        if not clean or is_external(clean):
            return None

        for strategy in self.strategies:
            try:
                found = strategy.find(clean, source, self.vault)
            except VaultError as exc:
                logger.debug("%s lookup failed for %s: %s", strategy.name, clean, exc)
                continue
            if found is not None:
                logger.debug("Resolved %s -> %s via %s", clean, found.path, strategy.name)
                return found
        return None

    def resolve_all(self, images: list[ImageReference], source: VaultFile) -> ResolutionReport:
        report = ResolutionReport()
        for image in images:
            found = self.resolve(image.path, source)
            if found is None:
                logger.warning("Cannot resolve image: %s (path: %s)", image.name, image.path)
                report.unresolved.append(image)
            else:
                report.files[image.path] = found
        return report
