"""Textual TUI for browsing notes."""

from .app import CardViewApp

__all__ = ["CardViewApp"]
