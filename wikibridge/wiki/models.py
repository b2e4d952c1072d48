"""Pydantic models for Wiki.js pages, asset folders and mutation results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WikiModel(BaseModel):
    # GraphQL speaks camelCase
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResponseResult(_WikiModel):
    succeeded: bool = False
    error_code: int = 0
    slug: str = ""
    message: str | None = None


class WikiPage(_WikiModel):
    id: int
    path: str
    title: str = ""
    description: str = ""
    locale: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class FolderNode(_WikiModel):
    """An asset folder. parent_id 0 is the asset root."""

    id: int
    slug: str
    name: str | None = None
    parent_id: int = 0


class AssetUploadResponse(BaseModel):
    succeeded: bool = False
    url: str | None = None
    path: str | None = None
    message: str | None = None

    @property
    def location(self) -> str | None:
        return self.url or self.path


class PageResult(BaseModel):
    """Page-level outcome of a create or update."""

    success: bool
    message: str
    page_id: int | None = None
    page_url: str | None = None


class AssetOutcome(BaseModel):
    """Per-image outcome of an upload attempt."""

    name: str
    source_path: str = Field(description="Reference path as written in the note")
    remote_path: str | None = None
    success: bool = False
    message: str = ""
