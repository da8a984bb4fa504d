"""
Delta-T override file (swe_deltat.txt / sedeltat.txt).

One record per line:

    YYYY  seconds.fraction

Blank lines and lines starting with '#' are ignored; anything else that does
not match is skipped.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import AsyncIterator, Iterator, List, Optional, Sequence, Union

from ..core.errors import DataSourceError
from ..core.types import DeltaTRecord

logger = logging.getLogger(__name__)

DELTAT_FILE_NAMES = ("swe_deltat.txt", "sedeltat.txt")

_RECORD_RE = re.compile(r"^(\d{4})\s+(\d+\.\d+)$")

PathLike = Union[str, Path]


def parse_deltat_lines(lines: Sequence[str], *, origin: str = "<lines>") -> List[DeltaTRecord]:
    out: List[DeltaTRecord] = []
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip(" \t\r\n")
        if not line or line.startswith("#"):
            continue
        m = _RECORD_RE.match(line)
        if m is None:
            logger.debug("%s:%d: skipping malformed Delta-T line %r", origin, lineno, line)
            continue
        out.append(DeltaTRecord(int(m.group(1)), float(m.group(2))))
    return out


class DeltaTFileSource:
    """
    Delta-T records read from a text file.

    path:
        Explicit file. When omitted, `directory` (default: current directory)
        is searched for swe_deltat.txt, then sedeltat.txt.

    A missing file yields no records. A file that exists but cannot be read
    raises DataSourceError.
    """

    def __init__(self, path: Optional[PathLike] = None, *, directory: Optional[PathLike] = None) -> None:
        self.path = Path(path).expanduser() if path is not None else None
        self.directory = Path(directory).expanduser() if directory is not None else Path(".")

    def __repr__(self) -> str:
        return f"DeltaTFileSource(path={self.path!r}, directory={self.directory!r})"

    def resolve(self) -> Optional[Path]:
        """First existing candidate file, or None."""
        if self.path is not None:
            return self.path if self.path.is_file() else None
        for name in DELTAT_FILE_NAMES:
            p = self.directory / name
            if p.is_file():
                return p
        return None

    def read_lines(self) -> List[str]:
        p = self.resolve()
        if p is None:
            logger.debug("no Delta-T file found (%r)", self)
            return []
        try:
            return p.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise DataSourceError(f"cannot read Delta-T file {p}: {e}") from e

    def records(self) -> List[DeltaTRecord]:
        p = self.resolve()
        return parse_deltat_lines(self.read_lines(), origin=str(p) if p else "<none>")

    def __iter__(self) -> Iterator[DeltaTRecord]:
        return iter(self.records())

    async def __aiter__(self) -> AsyncIterator[DeltaTRecord]:
        recs = await asyncio.to_thread(self.records)
        for r in recs:
            yield r
