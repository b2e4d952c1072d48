"""Vault implementation backed by a directory on disk."""

from __future__ import annotations

import asyncio
import logging
import posixpath
from pathlib import Path

from wikibridge.vault.base import Vault, VaultError, VaultFile, join_path

logger = logging.getLogger(__name__)

# Host config and trash folders are never part of the note collection
_IGNORED_DIRS = frozenset({".obsidian", ".trash", ".git"})


class LocalVault(Vault):
    """A vault rooted at a local directory (e.g. an Obsidian vault folder)."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise ValueError(f"Vault root is not a directory: {self.root}")

    # -- Path helpers --------------------------------------------------------

    def _abs(self, path: str) -> Path | None:
        """Map a vault path to disk, refusing anything that escapes the root."""
        target = (self.root / join_path(path)).resolve()
        if not target.is_relative_to(self.root):
            logger.warning("Path traversal rejected: %s", path)
            return None
        return target

    def relative(self, path: str | Path) -> str:
        """Vault path of a file on disk."""
        resolved = Path(path).resolve()
        if not resolved.is_relative_to(self.root):
            raise ValueError(f"{path} is outside the vault at {self.root}")
        return resolved.relative_to(self.root).as_posix()

    # -- Lookups -------------------------------------------------------------

    def get_file(self, path: str) -> VaultFile | None:
        normalized = join_path(path)
        if not normalized:
            return None
        target = self._abs(normalized)
        if target is None or not target.is_file():
            return None
        return VaultFile(path=normalized)

    def is_folder(self, path: str) -> bool:
        target = self._abs(path)
        return target is not None and target.is_dir()

    def list_files(self) -> list[VaultFile]:
        files: list[VaultFile] = []
        for p in sorted(self.root.rglob("*")):
            rel = p.relative_to(self.root)
            if any(part in _IGNORED_DIRS for part in rel.parts):
                continue
            if p.is_file():
                files.append(VaultFile(path=rel.as_posix()))
        return files

    def resolve_link(self, linkpath: str, source_path: str) -> VaultFile | None:
        """Resolve like Obsidian's first-linkpath-destination lookup.

        Order: path relative to the source note, exact vault path, then the
        best basename match (same folder as the source first, then the
        shortest path).
        """
        link = linkpath.split("#")[0].split("|")[0].strip()
        if not link:
            return None
        has_ext = bool(posixpath.splitext(link)[1])
        variants = [link] if has_ext else [link, f"{link}.md"]
        source_dir = posixpath.dirname(source_path)

        for variant in variants:
            if "/" in variant:
                found = self.get_file(join_path(source_dir, variant))
                if found:
                    return found
            found = self.get_file(variant)
            if found:
                return found

        suffixes = {"/" + join_path(v) for v in variants}
        candidates = [
            f for f in self.list_files()
            if any(("/" + f.path).endswith(s) for s in suffixes)
        ]
        if not candidates:
            return None
        for f in candidates:
            if f.parent == source_dir:
                return f
        return min(candidates, key=lambda f: (len(f.path), f.path))

    # -- Reads ---------------------------------------------------------------

    async def read_text(self, file: VaultFile) -> str:
        target = self._abs(file.path)
        if target is None:
            raise VaultError(f"Refusing to read outside the vault: {file.path}")
        try:
            return await asyncio.to_thread(target.read_text, encoding="utf-8")
        except OSError as exc:
            raise VaultError(f"Cannot read {file.path}: {exc}") from exc

    async def read_binary(self, file: VaultFile) -> bytes:
        target = self._abs(file.path)
        if target is None:
            raise VaultError(f"Refusing to read outside the vault: {file.path}")
        try:
            return await asyncio.to_thread(target.read_bytes)
        except OSError as exc:
            raise VaultError(f"Cannot read {file.path}: {exc}") from exc
