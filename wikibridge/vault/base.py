"""Abstract vault interface: the host file system as seen by the publisher."""

from __future__ import annotations

import posixpath
from abc import ABC, abstractmethod

from pydantic import BaseModel


class VaultError(Exception):
    """A vault lookup or read failed."""


class VaultFile(BaseModel):
    """A file inside the vault, addressed by its vault-relative POSIX path."""

    path: str

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def parent(self) -> str:
        """Containing folder path; '' is the vault root."""
        return posixpath.dirname(self.path)

    @property
    def stem(self) -> str:
        return posixpath.splitext(self.name)[0]


def join_path(*parts: str) -> str:
    """Join vault path segments and collapse ./, ../ and duplicate slashes.

    Leading '..' segments that would climb above the root are dropped.
    """
    joined = "/".join(p.strip("/") for p in parts if p and p.strip("/"))
    if not joined:
        return ""
    segments: list[str] = []
    for part in joined.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if segments:
                segments.pop()
            continue
        segments.append(part)
    return "/".join(segments)


class Vault(ABC):
    """Provider-agnostic view of a note collection.

    Lookups are synchronous (they hit the host's in-memory index); reads
    are coroutines since they touch storage.
    """

    @abstractmethod
    def get_file(self, path: str) -> VaultFile | None:
        """Exact lookup of a file by vault path. Folders return None."""
        ...

    @abstractmethod
    def is_folder(self, path: str) -> bool:
        ...

    @abstractmethod
    def resolve_link(self, linkpath: str, source_path: str) -> VaultFile | None:
        """Resolve a note-style link the way the host does, relative to source_path."""
        ...

    @abstractmethod
    def list_files(self) -> list[VaultFile]:
        ...

    @abstractmethod
    async def read_text(self, file: VaultFile) -> str:
        ...

    @abstractmethod
    async def read_binary(self, file: VaultFile) -> bytes:
        ...
