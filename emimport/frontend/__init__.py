"""Front ends that produce resolved declaration trees."""

from __future__ import annotations

from .base import Frontend, FrontendError
from .clang import ClangDeclaration, ClangFrontend
from .memory import DeclNode, MemoryFrontend

__all__ = [
    "ClangDeclaration",
    "ClangFrontend",
    "DeclNode",
    "Frontend",
    "FrontendError",
    "MemoryFrontend",
]
