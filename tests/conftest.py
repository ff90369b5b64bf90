from __future__ import annotations

import io

import pytest

from emimport.emitter import DescriptorEmitter
from emimport.frontend.memory import resolve_symbol


@pytest.fixture
def sink() -> io.StringIO:
    """Collects emitted descriptor lines."""
    return io.StringIO()


@pytest.fixture
def emitter(sink: io.StringIO) -> DescriptorEmitter:
    """Emitter writing to the shared sink and resolving names from node symbols."""
    return DescriptorEmitter(sink, resolve_symbol)
