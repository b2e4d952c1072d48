"""Wiki.js client: GraphQL queries/mutations and asset uploads over httpx."""

from __future__ import annotations

import json
import logging
import mimetypes
from typing import Any

import httpx
from pydantic import ValidationError

from wikibridge.wiki.errors import WikiError, WikiRemoteError, WikiTransportError
from wikibridge.wiki.models import (
    AssetUploadResponse,
    FolderNode,
    PageResult,
    ResponseResult,
    WikiPage,
)

logger = logging.getLogger(__name__)

_CHECK_QUERY = """
{
  pages {
    list(limit: 1) {
      id
    }
  }
}
"""

_LIST_PAGES_QUERY = """
{
  pages {
    list(orderBy: TITLE) {
      id
      path
      title
      createdAt
      updatedAt
    }
  }
}
"""

_SEARCH_PAGES_QUERY = """
query ($path: String!) {
  pages {
    search(query: $path) {
      results {
        id
        title
        description
        path
        locale
      }
    }
  }
}
"""

_CREATE_PAGE_MUTATION = """
mutation ($content: String!, $description: String!, $editor: String!, $isPrivate: Boolean!, $isPublished: Boolean!, $locale: String!, $path: String!, $publishEndDate: Date, $publishStartDate: Date, $scriptCss: String, $scriptJs: String, $tags: [String]!, $title: String!) {
  pages {
    create(content: $content, description: $description, editor: $editor, isPrivate: $isPrivate, isPublished: $isPublished, locale: $locale, path: $path, publishEndDate: $publishEndDate, publishStartDate: $publishStartDate, scriptCss: $scriptCss, scriptJs: $scriptJs, tags: $tags, title: $title) {
      responseResult { succeeded errorCode slug message }
      page { id path title }
    }
  }
}
"""

_UPDATE_PAGE_MUTATION = """
mutation ($id: Int!, $path: String!, $title: String!, $content: String!, $description: String, $tags: [String!]) {
  pages {
    update(id: $id, path: $path, title: $title, content: $content, description: $description, tags: $tags, isPublished: true, isPrivate: false, publishStartDate: "", publishEndDate: "", scriptCss: "", scriptJs: "") {
      responseResult { succeeded errorCode slug message }
      page { id path title }
    }
  }
}
"""

_LIST_FOLDERS_QUERY = """
query ($parentFolderId: Int!) {
  assets {
    folders(parentFolderId: $parentFolderId) {
      id
      slug
      name
    }
  }
}
"""

_CREATE_FOLDER_MUTATION = """
mutation ($parentFolderId: Int!, $slug: String!, $name: String) {
  assets {
    createFolder(parentFolderId: $parentFolderId, slug: $slug, name: $name) {
      responseResult { succeeded errorCode slug message }
    }
  }
}
"""


def _dig(data: Any, *keys: str) -> Any:
    """Walk nested response dicts, failing loudly on an unexpected shape."""
    for key in keys:
        if not isinstance(data, dict) or key not in data:
            raise WikiTransportError(f"Unexpected response shape: missing '{key}'")
        data = data[key]
    return data


class WikiClient:
    """Thin async client for one Wiki.js instance.

    Each call opens its own httpx.AsyncClient; no state is shared between
    calls. ``transport`` is handed to httpx and exists so callers can plug
    in a mock transport.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        locale: str = "en",
        editor: str = "markdown",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("Wiki.js URL is required")
        self.base_url = base_url.rstrip("/")
        self._token = token
        self.locale = locale
        self.editor = editor
        self.timeout = timeout
        self._transport = transport

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}

    def page_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    # -- Transport -----------------------------------------------------------

    async def _post(self, url: str, **kwargs: Any) -> httpx.Response:
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                resp = await client.post(url, headers=self._headers, **kwargs)
        except httpx.HTTPError as exc:
            raise WikiTransportError(f"Request to {url} failed: {exc}") from exc

        if not resp.is_success:
            raise WikiTransportError(
                f"HTTP error! status: {resp.status_code}, message: {resp.text}",
                status_code=resp.status_code,
                body=resp.text,
            )
        return resp

    async def graphql(self, query: str, variables: dict | None = None) -> dict:
        """Run one GraphQL operation and return its ``data`` object."""
        url = f"{self.base_url}/graphql"
        resp = await self._post(url, json={"query": query, "variables": variables or {}})
        try:
            result = resp.json()
        except ValueError as exc:
            raise WikiTransportError(
                f"Malformed JSON from {url}", status_code=resp.status_code, body=resp.text
            ) from exc

        # Batched requests come back as a list
        if isinstance(result, list):
            result = result[0] if result else {}
        if not isinstance(result, dict):
            raise WikiTransportError(
                f"Unexpected response from {url}", status_code=resp.status_code, body=resp.text
            )

        errors = result.get("errors")
        if errors:
            raise WikiRemoteError(
                [e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors]
            )
        return result.get("data") or {}

    # -- Pages ---------------------------------------------------------------

    async def check_connection(self) -> bool:
        try:
            await self.graphql(_CHECK_QUERY)
            return True
        except WikiError as exc:
            logger.error("Connection check failed: %s", exc)
            return False

    async def list_pages(self) -> list[WikiPage]:
        data = await self.graphql(_LIST_PAGES_QUERY)
        return [WikiPage.model_validate(p) for p in _dig(data, "pages", "list")]

    async def get_page_by_path(self, path: str) -> WikiPage | None:
        """Exact-path lookup. Search is fuzzy, so results are filtered on path."""
        data = await self.graphql(_SEARCH_PAGES_QUERY, {"path": path})
        for page in _dig(data, "pages", "search", "results"):
            if page.get("path") == path:
                return WikiPage.model_validate(page)
        return None

    async def create_page(
        self,
        path: str,
        title: str,
        content: str,
        description: str | None = None,
        tags: list[str] | None = None,
    ) -> PageResult:
        variables = {
            "content": content,
            "description": description or "",
            "editor": self.editor,
            "isPrivate": False,
            "isPublished": True,
            "locale": self.locale,
            "path": path,
            "publishEndDate": "",
            "publishStartDate": "",
            "scriptCss": "",
            "scriptJs": "",
            "tags": [t for t in (tags or []) if t and t.strip()],
            "title": title,
        }
        try:
            data = await self.graphql(_CREATE_PAGE_MUTATION, variables)
            return self._page_result(_dig(data, "pages", "create"), path, "created")
        except WikiError as exc:
            return PageResult(success=False, message=f"Error creating page: {exc}")

    async def update_page(
        self,
        page_id: int,
        path: str,
        title: str,
        content: str,
        description: str | None = None,
        tags: list[str] | None = None,
    ) -> PageResult:
        variables = {
            "id": page_id,
            "path": path,
            "title": title,
            "content": content,
            "description": description or "",
            "tags": [t for t in (tags or []) if t and t.strip()],
        }
        try:
            data = await self.graphql(_UPDATE_PAGE_MUTATION, variables)
            return self._page_result(_dig(data, "pages", "update"), path, "updated")
        except WikiError as exc:
            return PageResult(success=False, message=f"Error updating page: {exc}")

    def _page_result(self, payload: dict, path: str, verb: str) -> PageResult:
        try:
            outcome = ResponseResult.model_validate(_dig(payload, "responseResult"))
        except ValidationError as exc:
            raise WikiTransportError(f"Unexpected responseResult: {exc}") from exc
        if not outcome.succeeded:
            return PageResult(success=False, message=outcome.message or "Unknown error occurred")
        page = payload.get("page") or {}
        return PageResult(
            success=True,
            message=f"Page {verb} successfully",
            page_id=page.get("id"),
            page_url=self.page_url(path),
        )

    # -- Asset folders -------------------------------------------------------

    async def list_folders(self, parent_id: int = 0) -> list[FolderNode]:
        data = await self.graphql(_LIST_FOLDERS_QUERY, {"parentFolderId": parent_id})
        return [
            FolderNode.model_validate({**f, "parentId": parent_id})
            for f in _dig(data, "assets", "folders")
        ]

    async def create_folder(self, parent_id: int, slug: str, name: str | None = None) -> ResponseResult:
        data = await self.graphql(
            _CREATE_FOLDER_MUTATION,
            {"parentFolderId": parent_id, "slug": slug, "name": name or slug},
        )
        return ResponseResult.model_validate(
            _dig(data, "assets", "createFolder", "responseResult")
        )

    # -- Assets --------------------------------------------------------------

    async def upload_asset(self, file_name: str, data: bytes, folder_id: int = 0) -> AssetUploadResponse:
        """Multipart upload of one file into an asset folder."""
        mime = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
        files = [
            ("mediaUpload", (None, json.dumps({"folderId": folder_id}), "application/json")),
            ("mediaUpload", (file_name, data, mime)),
        ]
        url = f"{self.base_url}/u"
        resp = await self._post(url, files=files)

        # Stock Wiki.js answers a bare "ok"
        if resp.text.strip().lower() == "ok":
            return AssetUploadResponse(succeeded=True)
        try:
            return AssetUploadResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise WikiTransportError(
                f"Malformed upload response from {url}", status_code=resp.status_code, body=resp.text
            ) from exc
