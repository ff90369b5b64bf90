"""Top-down traversal of a declaration tree that dispatches marked functions."""

from __future__ import annotations

from typing import Optional

from .emitter import DescriptorEmitter
from .logging import get_logger
from .markers import CONSTRUCTOR_KIND, MarkerError, decode_class_marker, is_function_marker
from .models import Declaration, DeclKind, Directive, MemberPolicy

_LOGGER = get_logger("walker")


class DeclarationWalker:
    """Visits every declaration once and hands marked functions to the emitter.

    A marker on an aggregate applies to its direct members only: each member
    is offered to the emitter with the class name as context. A free function
    is emitted only when its own marker uses a function kind tag, and only
    when no marked class has already offered it. Traversal always continues
    into children afterwards, so nested aggregates are handled on their own
    visit.
    """

    def __init__(
        self,
        emitter: DescriptorEmitter,
        *,
        member_policy: MemberPolicy = MemberPolicy.MARKED,
    ) -> None:
        self._emitter = emitter
        self._member_policy = member_policy

    def walk(self, root: Declaration) -> int:
        """Traverse ``root`` and return the number of descriptors emitted."""
        before = self._emitter.count
        self._visit(root, offered=False)
        return self._emitter.count - before

    def _visit(self, decl: Declaration, *, offered: bool) -> None:
        # ``offered`` marks members already handed to the emitter by their class.
        members_offered = False
        if decl.kind is DeclKind.AGGREGATE:
            class_name = self._class_name(decl)
            if class_name is not None:
                _LOGGER.debug("Exporting members of %s as %s", decl.qualified_name, class_name)
                for member in decl.children():
                    self._emit_member(member, class_name)
                members_offered = True
        elif (
            not offered
            and decl.kind.is_function_like
            and is_function_marker(decl.annotation())
        ):
            self._emitter.emit(decl)

        for child in decl.children():
            self._visit(child, offered=members_offered)

    def _emit_member(self, member: Declaration, class_name: str) -> None:
        if self._emitter.emit(member, class_name) is not None:
            return
        if self._member_policy is not MemberPolicy.ALL:
            return
        # Unmarked members are exported implicitly only under the ALL policy.
        if member.kind is DeclKind.METHOD:
            directive = Directive(kind="method", class_name=class_name, import_name=member.name)
        elif member.kind is DeclKind.CONSTRUCTOR:
            directive = Directive(kind=CONSTRUCTOR_KIND, class_name=class_name)
        else:
            return
        self._emitter.emit_directive(member, directive)

    @staticmethod
    def _class_name(decl: Declaration) -> Optional[str]:
        try:
            return decode_class_marker(decl.annotation())
        except MarkerError as exc:
            raise MarkerError(f"{decl.qualified_name}: {exc}") from exc


__all__ = ["DeclarationWalker"]
