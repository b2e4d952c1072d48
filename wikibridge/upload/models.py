"""Pydantic models for the upload workflow."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from wikibridge.transform.models import ConversionResult
from wikibridge.wiki.folders import FolderPath
from wikibridge.wiki.models import AssetOutcome, PageResult


class Document(BaseModel):
    """A note as read from the vault. Read fresh for every upload attempt."""

    model_config = ConfigDict(frozen=True)

    text: str
    file_name: str
    folder_path: str = ""


class UploadDraft(BaseModel):
    """Editable defaults shown to the user before publishing."""

    note_path: str
    path: str
    title: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    preview: ConversionResult


class UploadRequest(BaseModel):
    """What the user confirmed: where and how to publish a note."""

    note_path: str
    path: str
    title: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)

    @classmethod
    def from_draft(cls, draft: UploadDraft, **overrides) -> UploadRequest:
        data = draft.model_dump(exclude={"preview"})
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)


class UploadOutcome(BaseModel):
    """Everything the caller needs to report back after an upload attempt."""

    path: str = ""
    page: PageResult
    assets: list[AssetOutcome] = Field(default_factory=list)
    folder: FolderPath | None = None
    cancelled: bool = False

    @property
    def success(self) -> bool:
        return self.page.success

    @property
    def failed_assets(self) -> list[AssetOutcome]:
        return [a for a in self.assets if not a.success]
