"""AssetFolderMaterializer: get-or-create of nested Wiki.js asset folders.

Uploaded images are stored under an asset folder tree mirroring the page
path (``notes/coco/my-page`` -> folders ``notes`` / ``coco``). Wiki.js has no
transactional "mkdir -p", so each segment goes through:

    list children -> hit: descend
                  -> miss: create -> re-list -> hit: descend
                                             -> miss: (create failed) keep current folder

Another client may create the same folder between our list and create; the
create then fails but the re-list finds the folder. Nothing is cached between
calls, so the remote tree is always re-read.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from wikibridge.wiki.errors import WikiError
from wikibridge.wiki.models import FolderNode, ResponseResult

logger = logging.getLogger(__name__)

ROOT_FOLDER_ID = 0


@runtime_checkable
class FolderStore(Protocol):
    """The remote operations the materializer needs."""

    async def list_folders(self, parent_id: int = 0) -> list[FolderNode]: ...

    async def create_folder(self, parent_id: int, slug: str, name: str | None = None) -> ResponseResult: ...


class FolderPath(BaseModel):
    """Result of materializing the asset folders for one page path."""

    folder_id: int = ROOT_FOLDER_ID
    slugs: list[str] = Field(default_factory=list, description="Segments actually descended into")
    degraded_segments: list[str] = Field(
        default_factory=list,
        description="Segments that could be neither found nor created",
    )

    @property
    def degraded(self) -> bool:
        return bool(self.degraded_segments)


def folder_segments(page_path: str) -> list[str]:
    """Folder slugs for a page path: every segment except the page's own name."""
    segments = [s for s in page_path.strip().split("/") if s]
    return segments[:-1]


class AssetFolderMaterializer:
    def __init__(self, store: FolderStore) -> None:
        self.store = store

    async def ensure_asset_folder_path(self, page_path: str) -> int:
        """Return the id of the deepest asset folder for page_path, creating folders as needed."""
        return (await self.materialize(page_path)).folder_id

    async def materialize(self, page_path: str) -> FolderPath:
        result = FolderPath()
        for slug in folder_segments(page_path):
            folder = await self._get_or_create(result.folder_id, slug)
            if folder is None:
                # Keep going under the shallower ancestor rather than failing the upload
                logger.warning(
                    "Asset folder '%s' under folder %d could not be created; "
                    "continuing in folder %d",
                    slug, result.folder_id, result.folder_id,
                )
                result.degraded_segments.append(slug)
                continue
            result.folder_id = folder.id
            result.slugs.append(slug)
        return result

    async def _get_or_create(self, parent_id: int, slug: str) -> FolderNode | None:
        existing = await self._find_child(parent_id, slug)
        if existing is not None:
            return existing

        created = await self._create(parent_id, slug)

        # createFolder does not return the new id, so look it up either way
        found = await self._find_child(parent_id, slug)
        if found is None and created:
            logger.warning("Folder '%s' reported created under %d but not listed", slug, parent_id)
        return found

    async def _find_child(self, parent_id: int, slug: str) -> FolderNode | None:
        try:
            children = await self.store.list_folders(parent_id)
        except WikiError as exc:
            logger.warning("Listing asset folders under %d failed: %s", parent_id, exc)
            return None
        for child in children:
            if child.slug == slug:
                return child
        return None

    async def _create(self, parent_id: int, slug: str) -> bool:
        try:
            outcome = await self.store.create_folder(parent_id, slug, slug)
        except WikiError as exc:
            logger.info("Creating asset folder '%s' under %d failed: %s", slug, parent_id, exc)
            return False
        if not outcome.succeeded:
            logger.info(
                "Creating asset folder '%s' under %d rejected: %s",
                slug, parent_id, outcome.message,
            )
            return False
        logger.debug("Created asset folder '%s' under %d", slug, parent_id)
        return True
