"""Pydantic models for markdown conversion."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ImageReference(BaseModel):
    """An embedded image found in a note, keyed by its normalized path."""

    name: str
    path: str


class ConversionResult(BaseModel):
    """Result of converting one note to Wiki.js markdown."""

    content: str
    title: str
    images: list[ImageReference] = Field(default_factory=list)
