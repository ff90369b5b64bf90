"""Decoding of ``EM_IMPORT:`` annotation markers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import Directive

MARKER_PREFIX = "EM_IMPORT:"
FUNCTION_KINDS = frozenset({"func", "function"})
CONSTRUCTOR_KIND = "constructor"
_DELIMITER = ":"


class MarkerError(ValueError):
    """Raised when a prefixed marker is missing a required payload segment."""


@dataclass(frozen=True)
class MarkerPayload:
    """Structural split of a marker: ``<kind>:<rest>``.

    ``rest`` is None when the payload carries no delimiter at all, which is
    distinct from an empty segment after a trailing colon.
    """

    kind: str
    rest: Optional[str]


def decode_marker(raw: Optional[str]) -> Optional[MarkerPayload]:
    """Split a raw annotation into kind and remainder.

    Returns None for absent text and for text without the recognised prefix;
    neither case is an error. Kinds are not checked against any vocabulary.
    """
    if raw is None or not raw.startswith(MARKER_PREFIX):
        return None
    data = raw[len(MARKER_PREFIX) :]
    kind, sep, rest = data.partition(_DELIMITER)
    return MarkerPayload(kind=kind, rest=rest if sep else None)


def decode_class_marker(raw: Optional[str]) -> Optional[str]:
    """Return the class name carried by a marker attached to an aggregate."""
    payload = decode_marker(raw)
    if payload is None:
        return None
    if payload.rest is None:
        raise MarkerError(f"Class marker {raw!r} is missing the class name segment")
    if not payload.rest:
        raise MarkerError(f"Class marker {raw!r} has an empty class name")
    return payload.rest


def decode_member_marker(raw: Optional[str]) -> Optional[Directive]:
    """Return the directive carried by a marker attached to a function."""
    payload = decode_marker(raw)
    if payload is None:
        return None
    if payload.rest is None and payload.kind != CONSTRUCTOR_KIND:
        raise MarkerError(f"Marker {raw!r} is missing the import name segment")
    return Directive(kind=payload.kind, import_name=payload.rest)


def is_function_kind(kind: str) -> bool:
    return kind in FUNCTION_KINDS


def is_function_marker(raw: Optional[str]) -> bool:
    """True when ``raw`` is a marker whose kind is one of the function tags."""
    payload = decode_marker(raw)
    return payload is not None and is_function_kind(payload.kind)


__all__ = [
    "CONSTRUCTOR_KIND",
    "FUNCTION_KINDS",
    "MARKER_PREFIX",
    "MarkerError",
    "MarkerPayload",
    "decode_class_marker",
    "decode_marker",
    "decode_member_marker",
    "is_function_kind",
    "is_function_marker",
]
