"""Wiki.js remote access."""

from wikibridge.config.loader import resolve_token
from wikibridge.config.models import WikiBridgeConfig
from wikibridge.wiki.client import WikiClient
from wikibridge.wiki.errors import WikiError, WikiRemoteError, WikiTransportError
from wikibridge.wiki.folders import (
    ROOT_FOLDER_ID,
    AssetFolderMaterializer,
    FolderPath,
    FolderStore,
    folder_segments,
)
from wikibridge.wiki.models import (
    AssetOutcome,
    AssetUploadResponse,
    FolderNode,
    PageResult,
    ResponseResult,
    WikiPage,
)


def create_client(config: WikiBridgeConfig) -> WikiClient:
    """Create a WikiClient from config.

    Resolves the token from the environment variable named in config.wiki.token_env.
    """
    if not config.wiki.url:
        raise ValueError("Wiki.js URL not configured. Set wiki.url in wikibridge.yaml.")
    return WikiClient(
        base_url=config.wiki.url,
        token=resolve_token(config),
        locale=config.wiki.locale,
        editor=config.wiki.editor,
        timeout=config.wiki.timeout,
    )


__all__ = [
    "ROOT_FOLDER_ID",
    "AssetFolderMaterializer",
    "AssetOutcome",
    "AssetUploadResponse",
    "FolderNode",
    "FolderPath",
    "FolderStore",
    "PageResult",
    "ResponseResult",
    "WikiClient",
    "WikiError",
    "WikiPage",
    "WikiRemoteError",
    "WikiTransportError",
    "create_client",
    "folder_segments",
]
