"""Publish Obsidian notes and their images to Wiki.js."""

__version__ = "0.1.0"
