"""Base classes for declaration-tree front ends."""

from abc import ABC, abstractmethod
from pathlib import Path

from ..models import TranslationUnit


class FrontendError(RuntimeError):
    """Raised when a source file cannot be turned into a resolved declaration tree."""


class Frontend(ABC):
    """Contract for front ends that parse one source file per call."""

    @abstractmethod
    def parse(self, path: Path) -> TranslationUnit:
        """Return the resolved declaration tree and name resolver for ``path``."""
