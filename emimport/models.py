"""Core data models shared across emimport components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol, Tuple


class DeclKind(Enum):
    """Declaration shapes the scanner distinguishes."""

    AGGREGATE = "aggregate"
    FUNCTION = "function"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    DESTRUCTOR = "destructor"
    OTHER = "other"

    @property
    def is_function_like(self) -> bool:
        return self in _FUNCTION_LIKE


_FUNCTION_LIKE = frozenset(
    {DeclKind.FUNCTION, DeclKind.METHOD, DeclKind.CONSTRUCTOR, DeclKind.DESTRUCTOR}
)


class MemberPolicy(Enum):
    """How a class-scoped marker treats members without a marker of their own."""

    MARKED = "marked"
    ALL = "all"


class Declaration(Protocol):
    """Read-only view of a node in a resolved declaration tree."""

    @property
    def kind(self) -> DeclKind: ...

    @property
    def name(self) -> str: ...

    @property
    def qualified_name(self) -> str: ...

    def annotation(self) -> Optional[str]:
        """Return the attached annotation text, or None when there is none."""

    def param_types(self) -> List[str]:
        """Return parameter type spellings in declaration order."""

    def return_type(self) -> str:
        """Return the spelling of the declared return type."""

    def children(self) -> Iterable["Declaration"]:
        """Yield direct child declarations in source order."""


NameResolver = Callable[[Declaration], str]


@dataclass(frozen=True)
class Directive:
    """Decoded import directive for a single declaration."""

    kind: str
    class_name: Optional[str] = None
    import_name: Optional[str] = None


@dataclass(frozen=True)
class Signature:
    """Parameter and return type spellings of a function-like declaration."""

    params: Tuple[str, ...]
    return_type: str


@dataclass
class TranslationUnit:
    """A parsed source file together with the resolver for its declarations."""

    path: Path
    root: Declaration
    resolve_name: NameResolver
