"""Vault access and image reference resolution."""

from wikibridge.vault.base import Vault, VaultError, VaultFile, join_path
from wikibridge.vault.local import LocalVault
from wikibridge.vault.resolver import (
    AbsolutePathStrategy,
    AttachmentFolderStrategy,
    FilenameSearchStrategy,
    ImageResolver,
    LinkStrategy,
    RelativePathStrategy,
    ResolutionReport,
    ResolveStrategy,
    default_strategies,
    detect_attachment_folder,
)

__all__ = [
    "AbsolutePathStrategy",
    "AttachmentFolderStrategy",
    "FilenameSearchStrategy",
    "ImageResolver",
    "LinkStrategy",
    "LocalVault",
    "RelativePathStrategy",
    "ResolutionReport",
    "ResolveStrategy",
    "Vault",
    "VaultError",
    "VaultFile",
    "default_strategies",
    "detect_attachment_folder",
    "join_path",
]
