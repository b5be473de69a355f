"""Language utilities for docker-snell.

This module centralizes the language options supported across the
application. Keeping it in the domain layer allows both CLI and service
layers to share a single source of truth without creating circular
imports with adapters.
"""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    """Supported natural-language choices for user-facing output."""

    CHINESE = "zh"
    ENGLISH = "en"

    @classmethod
    def default(cls) -> "Language":
        """Return the default language used across the application."""

        return cls.CHINESE

    def label(self) -> str:
        """Human readable label for prompts and logging."""

        return "中文" if self is Language.CHINESE else "English"
