"""Runs the descriptor pass over a list of translation units."""

from __future__ import annotations

import contextlib
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, TextIO, Tuple

from .emitter import DescriptorEmitter
from .frontend.base import Frontend
from .logging import get_logger
from .models import MemberPolicy
from .walker import DeclarationWalker

_LOGGER = get_logger("scanner")


@dataclass
class ScanReport:
    """Descriptor counts per scanned source, in scan order.

    A source passed more than once appears once per pass.
    """

    descriptors: List[Tuple[Path, int]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(count for _, count in self.descriptors)


class Scanner:
    """Parses each source with a front end and writes its descriptors to one sink."""

    def __init__(
        self,
        frontend: Frontend,
        *,
        member_policy: MemberPolicy = MemberPolicy.MARKED,
    ) -> None:
        self._frontend = frontend
        self._member_policy = member_policy

    def scan(self, sources: Sequence[Path], sink: TextIO) -> ScanReport:
        report = ScanReport()
        for source in sources:
            unit = self._frontend.parse(Path(source))
            emitter = DescriptorEmitter(sink, unit.resolve_name)
            walker = DeclarationWalker(emitter, member_policy=self._member_policy)
            count = walker.walk(unit.root)
            report.descriptors.append((unit.path, count))
            _LOGGER.info("Scanned %s: %d descriptor(s)", unit.path, count)
        return report


@contextlib.contextmanager
def open_output(path: Optional[Path]) -> Iterator[TextIO]:
    """Yield the named output file, or stdout when no path is given."""
    if path is None:
        yield sys.stdout
        sys.stdout.flush()
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        yield handle


__all__ = ["ScanReport", "Scanner", "open_output"]
