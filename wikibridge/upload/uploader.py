"""Uploader: publishes one note and its images to Wiki.js."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable

from wikibridge.config.models import WikiBridgeConfig
from wikibridge.transform.models import ImageReference
from wikibridge.transform.paths import asset_filename, generate_path
from wikibridge.transform.processor import MarkdownProcessor
from wikibridge.transform.tags import extract_tags
from wikibridge.upload.models import Document, UploadDraft, UploadOutcome, UploadRequest
from wikibridge.vault.base import Vault, VaultError, VaultFile
from wikibridge.vault.resolver import ImageResolver
from wikibridge.wiki.client import WikiClient
from wikibridge.wiki.errors import WikiError
from wikibridge.wiki.folders import AssetFolderMaterializer, FolderPath
from wikibridge.wiki.models import AssetOutcome, PageResult, WikiPage

logger = logging.getLogger(__name__)

ConfirmUpdate = Callable[[WikiPage], bool | Awaitable[bool]]

# Upper bound on "-N" suffixes tried by the create-new behavior
_MAX_PATH_SUFFIX = 50


def merge_tags(*groups: list[str]) -> list[str]:
    """Concatenate tag lists, dropping blanks and later duplicates."""
    merged: list[str] = []
    for group in groups:
        for tag in group:
            tag = tag.strip()
            if tag and tag not in merged:
                merged.append(tag)
    return merged


class Uploader:
    """Sequences conversion, image resolution, folder setup, uploads and the page mutation.

    Nothing is cached between attempts: every ``upload`` call re-reads the
    note and re-walks the remote folder tree.
    """

    def __init__(
        self,
        client: WikiClient,
        vault: Vault,
        config: WikiBridgeConfig | None = None,
        resolver: ImageResolver | None = None,
    ) -> None:
        self.client = client
        self.vault = vault
        self.config = config or WikiBridgeConfig()
        self.processor = MarkdownProcessor(self.config.conversion)
        self.resolver = resolver or ImageResolver(vault)

    # -- Public API ----------------------------------------------------------

    async def prepare(self, note_path: str) -> UploadDraft:
        """Build the editable defaults (path, title, tags) and a preview conversion."""
        file = self._get_note(note_path)
        document = await self._read(file)
        preview = self.processor.process(document.text, document.file_name)
        return UploadDraft(
            note_path=file.path,
            path=generate_path(document.file_name, document.folder_path),
            title=preview.title,
            tags=merge_tags(extract_tags(document.text), self.config.upload.default_tags),
            preview=preview,
        )

    async def upload(
        self,
        request: UploadRequest,
        confirm_update: ConfirmUpdate | None = None,
    ) -> UploadOutcome:
        """Publish a note. Remote failures come back in the outcome, never as exceptions."""
        path = request.path.strip()
        title = request.title.strip()
        if not path:
            return UploadOutcome(page=PageResult(success=False, message="Path cannot be empty"))
        if not title:
            return UploadOutcome(path=path, page=PageResult(success=False, message="Title cannot be empty"))

        try:
            file = self._get_note(request.note_path)
            document = await self._read(file)
        except (ValueError, VaultError) as exc:
            return UploadOutcome(path=path, page=PageResult(success=False, message=str(exc)))

        existing = await self._existing_page(path)
        if existing is not None:
            behavior = self.config.upload.behavior
            if behavior == "create-new":
                try:
                    new_path = await self._free_path(path)
                except WikiError as exc:
                    logger.error("Could not look for a free path next to %s: %s", path, exc)
                    return UploadOutcome(
                        path=path,
                        page=PageResult(
                            success=False,
                            message=f"Could not check for a free path next to {path}: {exc}",
                        ),
                    )
                if new_path is None:
                    return UploadOutcome(
                        path=path,
                        page=PageResult(success=False, message=f"No free path found next to {path}"),
                    )
                logger.info("Page exists at %s; publishing to %s instead", path, new_path)
                path, existing = new_path, None
            elif behavior == "ask":
                if not await self._confirm(confirm_update, existing):
                    return UploadOutcome(
                        path=path,
                        cancelled=True,
                        page=PageResult(
                            success=False,
                            message=f'Update cancelled: a page already exists at "{path}"',
                        ),
                    )

        conversion = self.processor.process(document.text, document.file_name, path)
        folder, assets = await self._upload_images(conversion.images, file, path)

        description = request.description.strip() or None
        tags = merge_tags(request.tags)
        if existing is not None:
            page = await self.client.update_page(
                existing.id, path, title, conversion.content, description, tags
            )
        else:
            page = await self.client.create_page(path, title, conversion.content, description, tags)

        verb = "update" if existing is not None else "create"
        if page.success:
            logger.info("Page %sd: %s", verb, page.page_url)
        else:
            logger.error("Failed to %s page %s: %s", verb, path, page.message)
        return UploadOutcome(path=path, page=page, assets=assets, folder=folder)

    # -- Internals -----------------------------------------------------------

    def _get_note(self, note_path: str) -> VaultFile:
        file = self.vault.get_file(note_path)
        if file is None:
            raise ValueError(f"Note not found in vault: {note_path}")
        return file

    async def _read(self, file: VaultFile) -> Document:
        text = await self.vault.read_text(file)
        return Document(text=text, file_name=file.name, folder_path=file.parent)

    async def _existing_page(self, path: str) -> WikiPage | None:
        try:
            return await self.client.get_page_by_path(path)
        except WikiError as exc:
            logger.warning("Could not check for an existing page at %s: %s", path, exc)
            return None

    async def _free_path(self, path: str) -> str | None:
        """First unused "<path>-N". Lookup errors propagate to the caller."""
        for n in range(2, _MAX_PATH_SUFFIX + 2):
            candidate = f"{path}-{n}"
            if await self.client.get_page_by_path(candidate) is None:
                return candidate
        return None

    @staticmethod
    async def _confirm(confirm_update: ConfirmUpdate | None, existing: WikiPage) -> bool:
        if confirm_update is None:
            return False
        answer = confirm_update(existing)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    async def _upload_images(
        self, images: list[ImageReference], source: VaultFile, page_path: str
    ) -> tuple[FolderPath | None, list[AssetOutcome]]:
        if not images:
            return None, []

        folder = await AssetFolderMaterializer(self.client).materialize(page_path)
        logger.info("Asset folder prepared, folderId: %d", folder.folder_id)

        report = self.resolver.resolve_all(images, source)
        outcomes: list[AssetOutcome] = []
        # Strictly one at a time: folder creation assumes no sibling uploads in flight
        for image in images:
            outcomes.append(await self._upload_image(image, report.files.get(image.path), folder))
        return folder, outcomes

    async def _upload_image(
        self, image: ImageReference, file: VaultFile | None, folder: FolderPath
    ) -> AssetOutcome:
        if file is None:
            return AssetOutcome(
                name=image.name,
                source_path=image.path,
                message=f"Image file not found: {image.name}",
            )
        try:
            data = await self.vault.read_binary(file)
            response = await self.client.upload_asset(file.name, data, folder.folder_id)
        except (VaultError, WikiError) as exc:
            logger.error("Failed to upload image %s: %s", image.name, exc)
            return AssetOutcome(
                name=image.name,
                source_path=image.path,
                message=f"Failed to upload image {image.name}: {exc}",
            )

        if not response.succeeded:
            return AssetOutcome(
                name=image.name,
                source_path=image.path,
                message=response.message or f"Upload of {file.name} was rejected",
            )
        remote_path = response.location or "/" + "/".join([*folder.slugs, asset_filename(file.name)])
        logger.info("Uploaded %s -> %s", file.path, remote_path)
        return AssetOutcome(
            name=image.name,
            source_path=image.path,
            remote_path=remote_path,
            success=True,
            message=f"{file.name} uploaded successfully",
        )
