"""Shared test fixtures for wikibridge."""

from __future__ import annotations

from pathlib import Path

import pytest

from wikibridge.config.models import WikiBridgeConfig
from wikibridge.vault.local import LocalVault
from wikibridge.wiki.errors import WikiRemoteError
from wikibridge.wiki.models import (
    AssetUploadResponse,
    FolderNode,
    PageResult,
    ResponseResult,
    WikiPage,
)


class FakeWiki:
    """In-memory stand-in for WikiClient.

    Folders live in a dict keyed by (parent_id, slug). Slugs listed in
    ``race_slugs`` simulate another client winning the creation race: the
    create call fails, but the folder exists by the time we re-list.
    Slugs in ``broken_slugs`` can never be created.
    """

    def __init__(self, pages: list[WikiPage] | None = None) -> None:
        self.folders: dict[tuple[int, str], int] = {}
        self.next_id = 1
        self.race_slugs: set[str] = set()
        self.broken_slugs: set[str] = set()
        self.failing_uploads: set[str] = set()
        self.pages: dict[str, WikiPage] = {p.path: p for p in (pages or [])}
        self.calls: list[tuple] = []
        self.uploads: list[tuple[str, bytes, int]] = []
        self.base_url = "https://wiki.example.com"

    # -- folders -----------------------------------------------------------

    def add_folder(self, parent_id: int, slug: str) -> int:
        folder_id = self.next_id
        self.next_id += 1
        self.folders[(parent_id, slug)] = folder_id
        return folder_id

    async def list_folders(self, parent_id: int = 0) -> list[FolderNode]:
        self.calls.append(("list_folders", parent_id))
        return [
            FolderNode(id=fid, slug=slug, name=slug, parent_id=pid)
            for (pid, slug), fid in self.folders.items()
            if pid == parent_id
        ]

    async def create_folder(self, parent_id: int, slug: str, name: str | None = None) -> ResponseResult:
        self.calls.append(("create_folder", parent_id, slug))
        if slug in self.broken_slugs:
            raise WikiRemoteError(["Forbidden"])
        if slug in self.race_slugs:
            # Someone else got there first
            self.add_folder(parent_id, slug)
            return ResponseResult(succeeded=False, error_code=2001, message="Folder already exists")
        if (parent_id, slug) in self.folders:
            return ResponseResult(succeeded=False, message="Folder already exists")
        self.add_folder(parent_id, slug)
        return ResponseResult(succeeded=True, message="Folder created")

    # -- pages -------------------------------------------------------------

    def page_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    async def get_page_by_path(self, path: str) -> WikiPage | None:
        self.calls.append(("get_page_by_path", path))
        return self.pages.get(path)

    async def create_page(self, path, title, content, description=None, tags=None) -> PageResult:
        self.calls.append(("create_page", path, title, content, description, tags))
        page = WikiPage(id=100 + len(self.pages), path=path, title=title)
        self.pages[path] = page
        return PageResult(
            success=True, message="Page created successfully",
            page_id=page.id, page_url=self.page_url(path),
        )

    async def update_page(self, page_id, path, title, content, description=None, tags=None) -> PageResult:
        self.calls.append(("update_page", page_id, path, title, content, description, tags))
        return PageResult(
            success=True, message="Page updated successfully",
            page_id=page_id, page_url=self.page_url(path),
        )

    # -- assets ------------------------------------------------------------

    async def upload_asset(self, file_name: str, data: bytes, folder_id: int = 0) -> AssetUploadResponse:
        self.calls.append(("upload_asset", file_name, folder_id))
        if file_name in self.failing_uploads:
            raise WikiRemoteError(["Upload rejected"])
        self.uploads.append((file_name, data, folder_id))
        return AssetUploadResponse(succeeded=True)


@pytest.fixture
def fake_wiki():
    return FakeWiki()


@pytest.fixture
def sample_config():
    return WikiBridgeConfig()


SAMPLE_NOTE = """\
---
tags: [guide, howto]
---

# Getting Started

Welcome! See [[Other Note|the other note]] and [[Setup Steps]].

![[diagram.png]]
![[screens/Login Screen.PNG|login]]
![missing](nowhere.png)

> [!tip] Remember
> Back up first.

Tagged #python here.
"""


@pytest.fixture
def vault_dir(tmp_path: Path) -> Path:
    """A small vault: a note in docs/ with an attachments folder."""
    root = tmp_path / "vault"
    (root / "docs" / "attachments").mkdir(parents=True)
    (root / "docs" / "screens").mkdir()
    (root / ".obsidian").mkdir()
    (root / "docs" / "Getting Started.md").write_text(SAMPLE_NOTE, encoding="utf-8")
    (root / "docs" / "attachments" / "diagram.png").write_bytes(b"\x89PNG-diagram")
    (root / "docs" / "screens" / "Login Screen.PNG").write_bytes(b"\x89PNG-login")
    (root / ".obsidian" / "app.json").write_text("{}")
    return root


@pytest.fixture
def local_vault(vault_dir: Path) -> LocalVault:
    return LocalVault(vault_dir)


@pytest.fixture
def sample_note() -> str:
    return SAMPLE_NOTE
