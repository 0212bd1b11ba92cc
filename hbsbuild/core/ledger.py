# hbsbuild/core/ledger.py
"""
The dependency ledger: every file a builder has read, kept so the next build
pass can tell whether a changed file concerns it.
"""
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Union
import structlog

from hbsbuild.util import strip_utf8_bom

log = structlog.get_logger(__name__)

PathLike = Union[str, Path]

def _normalize(path: PathLike) -> str:
    return os.path.abspath(os.fspath(path))

class DependencyLedger:
    """
    Append-only record of absolute file paths consumed by a builder.

    Duplicates are allowed; only membership matters. Entries are never removed,
    so a stale path can at worst cause one extra rebuild.
    """

    def __init__(self):
        self._paths: List[str] = []

    def record(self, *paths: PathLike) -> None:
        for path in paths:
            if path:
                self._paths.append(_normalize(path))

    def contains_any(self, candidates: Iterable[PathLike]) -> bool:
        for candidate in candidates:
            if candidate and _normalize(candidate) in self._paths:
                return True
        return False

    def read_file(self, path: PathLike) -> str:
        # the path is recorded before reading so a missing file is still watched.
        self.record(path)
        log.debug("reading_dependency_file", path=str(path))
        return strip_utf8_bom(Path(path).read_bytes()).decode("utf-8")

    def __contains__(self, path: PathLike) -> bool:
        return self.contains_any([path])

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)
