"""Note publishing workflow."""

from wikibridge.upload.models import Document, UploadDraft, UploadOutcome, UploadRequest
from wikibridge.upload.uploader import Uploader, merge_tags

__all__ = [
    "Document",
    "UploadDraft",
    "UploadOutcome",
    "UploadRequest",
    "Uploader",
    "merge_tags",
]
