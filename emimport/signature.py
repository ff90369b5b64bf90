"""Signature extraction for function-like declarations."""

from __future__ import annotations

from .models import Declaration, Signature


def extract_signature(decl: Declaration) -> Signature:
    """Return parameter and return type spellings exactly as the front end prints them."""
    if not decl.kind.is_function_like:
        raise ValueError(
            f"Cannot extract a signature from {decl.kind.value} declaration '{decl.qualified_name}'"
        )
    return Signature(params=tuple(decl.param_types()), return_type=decl.return_type())


__all__ = ["extract_signature"]
