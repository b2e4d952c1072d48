"""Page path and asset filename normalization.

Wiki.js normalizes uploaded asset filenames on its own (lowercase, whitespace
to underscore). Everything here must reproduce those rules exactly so the
image URLs written into page content point at the files that actually land
on the server.
"""

from __future__ import annotations

import re

_DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-")
_WHITESPACE_RE = re.compile(r"\s+")
_PAGE_UNSAFE_RE = re.compile(r"[^a-z0-9\-_]")
_FOLDER_UNSAFE_RE = re.compile(r"[^a-z0-9\-_/]")
_EDGE_SLASHES_RE = re.compile(r"^/+|/+$")

EXTERNAL_PREFIXES = ("http://", "https://", "data:")


def strip_note_extension(file_name: str) -> str:
    return re.sub(r"\.md$", "", file_name)


def strip_date_prefix(name: str) -> str:
    return _DATE_PREFIX_RE.sub("", name)


def generate_path(file_name: str, folder_path: str | None = None) -> str:
    """Build the Wiki.js page path for a note.

    >>> generate_path("2024-01-01-My Note.md", "Folder A")
    'folder-a/my-note'
    """
    path = strip_note_extension(file_name)
    path = _WHITESPACE_RE.sub("-", path.lower())
    path = strip_date_prefix(path)
    path = _PAGE_UNSAFE_RE.sub("", path)

    if folder_path and folder_path != "/":
        clean_folder = _WHITESPACE_RE.sub("-", folder_path.lower())
        clean_folder = _FOLDER_UNSAFE_RE.sub("", clean_folder)
        clean_folder = _EDGE_SLASHES_RE.sub("", clean_folder)
        if clean_folder:
            path = f"{clean_folder}/{path}"

    return path


def asset_filename(reference: str) -> str:
    """Filename the remote store will assign to an uploaded image."""
    name = reference.split("/")[-1].strip() or reference.strip()
    return _WHITESPACE_RE.sub("_", name).lower()


def image_url(reference: str, page_path: str | None = None) -> str:
    """Root-relative URL of an embedded image once uploaded next to its page."""
    file_name = asset_filename(reference)
    if page_path:
        clean_path = page_path[1:] if page_path.startswith("/") else page_path
        if clean_path:
            return f"/{clean_path}/{file_name}"
    return f"/{file_name}"


def normalize_image_path(path: str) -> str:
    """Canonical form of a raw image reference, used as its identity."""
    path = path.strip().replace("\\", "/")
    if path.startswith("/"):
        path = path[1:]
    if path.startswith("./"):
        path = path[2:]
    return path.split("?")[0].split("#")[0]


def is_external(path: str) -> bool:
    return path.startswith(EXTERNAL_PREFIXES)
