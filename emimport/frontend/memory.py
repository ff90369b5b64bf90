"""In-memory declaration trees for callers that already hold resolved declarations."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from ..models import Declaration, DeclKind, TranslationUnit
from .base import Frontend, FrontendError


@dataclass(eq=False)
class DeclNode:
    """A plain declaration node implementing the ``Declaration`` protocol."""

    kind: DeclKind
    name: str = ""
    marker: Optional[str] = None
    params: List[str] = field(default_factory=list)
    returns: str = "void"
    members: List["DeclNode"] = field(default_factory=list)
    symbol: Optional[str] = None
    parent: Optional["DeclNode"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        for member in self.members:
            member.parent = self

    @property
    def qualified_name(self) -> str:
        names: List[str] = []
        node: Optional[DeclNode] = self
        while node is not None:
            if node.name:
                names.append(node.name)
            node = node.parent
        return "::".join(reversed(names))

    def annotation(self) -> Optional[str]:
        return self.marker

    def param_types(self) -> List[str]:
        return list(self.params)

    def return_type(self) -> str:
        return self.returns

    def children(self) -> Iterable[DeclNode]:
        return iter(self.members)


def resolve_symbol(decl: Declaration) -> str:
    """Use the node's explicit symbol, falling back to its qualified name."""
    if isinstance(decl, DeclNode) and decl.symbol:
        return decl.symbol
    return decl.qualified_name


class MemoryFrontend(Frontend):
    """Serves pre-built trees keyed by source path."""

    def __init__(self, units: Mapping[Path, DeclNode]) -> None:
        self._units: Dict[Path, DeclNode] = {Path(path): root for path, root in units.items()}

    def parse(self, path: Path) -> TranslationUnit:
        root = self._units.get(Path(path))
        if root is None:
            raise FrontendError(f"No declaration tree registered for {path}")
        return TranslationUnit(path=Path(path), root=root, resolve_name=resolve_symbol)


__all__ = ["DeclNode", "MemoryFrontend", "resolve_symbol"]
