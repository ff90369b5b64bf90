"""Tests for the in-memory front end."""

from __future__ import annotations

from pathlib import Path

import pytest

from emimport.frontend.base import FrontendError
from emimport.frontend.memory import MemoryFrontend, resolve_symbol
from emimport.models import DeclKind
from tests._fixtures.trees import function, record, unit


def test_decl_node_qualified_name_follows_parents() -> None:
    method = function("doX", kind=DeclKind.METHOD)
    record("Widget", method)
    assert method.qualified_name == "Widget::doX"


def test_resolve_symbol_prefers_explicit_symbol() -> None:
    assert resolve_symbol(function("f", symbol="_Z1fv")) == "_Z1fv"
    method = function("doX", kind=DeclKind.METHOD)
    record("Widget", method)
    assert resolve_symbol(method) == "Widget::doX"


def test_memory_frontend_serves_registered_units() -> None:
    root = unit(function("f"))
    translation_unit = MemoryFrontend({"a.cpp": root}).parse(Path("a.cpp"))
    assert translation_unit.root is root
    assert translation_unit.path == Path("a.cpp")
    assert translation_unit.resolve_name is resolve_symbol


def test_memory_frontend_rejects_unknown_paths() -> None:
    with pytest.raises(FrontendError):
        MemoryFrontend({}).parse(Path("a.cpp"))
