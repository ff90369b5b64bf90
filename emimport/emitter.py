"""Descriptor line formatting and output."""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, TextIO

from .logging import get_logger
from .markers import CONSTRUCTOR_KIND, MarkerError, decode_member_marker, is_function_kind
from .models import Declaration, Directive, NameResolver, Signature
from .signature import extract_signature

_LOGGER = get_logger("emitter")


class InvariantViolation(RuntimeError):
    """Raised when a directive reaches the formatter in an inconsistent state.

    This is an internal-consistency failure, not a user error; callers are
    expected to abort the run.
    """


def format_descriptor(directive: Directive, resolved_name: str, signature: Signature) -> str:
    """Render one descriptor line (without the trailing newline)."""
    if not is_function_kind(directive.kind) and not directive.class_name:
        raise InvariantViolation(
            f"Directive of kind '{directive.kind}' for {resolved_name} has no enclosing class"
        )

    parts: List[str] = [directive.kind]
    if directive.class_name:
        parts.append(_quote(directive.class_name))
    parts.append(resolved_name)
    if directive.kind != CONSTRUCTOR_KIND:
        parts.append(_quote(directive.import_name or ""))
    params = " ".join(_quote(param) for param in signature.params)
    parts.append(f"({params})")
    parts.append(_quote(signature.return_type))
    return "(" + " ".join(parts) + ")"


def _quote(text: str) -> str:
    return f'"{text}"'


class DescriptorEmitter:
    """Writes one descriptor line per marked function to a text sink."""

    def __init__(self, sink: TextIO, resolve_name: NameResolver) -> None:
        self._sink = sink
        self._resolve_name = resolve_name
        self.count = 0

    def emit(self, decl: Declaration, enclosing_class: Optional[str] = None) -> Optional[str]:
        """Emit ``decl`` if it is function-like and carries a marker of its own."""
        if not decl.kind.is_function_like:
            return None
        try:
            directive = decode_member_marker(decl.annotation())
        except MarkerError as exc:
            raise MarkerError(f"{decl.qualified_name}: {exc}") from exc
        if directive is None:
            return None
        return self.emit_directive(decl, replace(directive, class_name=enclosing_class))

    def emit_directive(self, decl: Declaration, directive: Directive) -> str:
        line = format_descriptor(directive, self._resolve_name(decl), extract_signature(decl))
        self._sink.write(line + "\n")
        self.count += 1
        _LOGGER.debug("Emitted %s for %s", directive.kind, decl.qualified_name)
        return line


__all__ = ["DescriptorEmitter", "InvariantViolation", "format_descriptor"]
