# hbsbuild/core/change_detection.py
"""
Decides, once per build pass, whether any of a builder's inputs changed.

Hosts report file modification times in one of two shapes: a mapping of
path -> timestamp, or an iterable of (path, timestamp) pairs. Both are wrapped
in a TimestampSnapshot at the boundary so the detection logic is written once.
"""
import math
import time
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple
import structlog

from .ledger import DependencyLedger

log = structlog.get_logger(__name__)

class TimestampSnapshot:
    """Watched paths plus a lookup from path to an optional modification time."""

    def __init__(self, timestamps: Optional[Dict[str, Optional[float]]] = None):
        self._timestamps: Dict[str, Optional[float]] = dict(timestamps or {})

    def paths(self) -> List[str]:
        return list(self._timestamps)

    def get(self, path: str) -> Optional[float]:
        return self._timestamps.get(path)

    def items(self) -> Iterator[Tuple[str, Optional[float]]]:
        return iter(self._timestamps.items())

    def __len__(self) -> int:
        return len(self._timestamps)

def snapshot_from_host(file_timestamps: Any) -> TimestampSnapshot:
    # adapts whichever timestamp collection the host hands over.
    if file_timestamps is None:
        return TimestampSnapshot()
    if isinstance(file_timestamps, TimestampSnapshot):
        return file_timestamps
    if isinstance(file_timestamps, Mapping):
        return TimestampSnapshot({str(k): file_timestamps[k] for k in file_timestamps.keys()})
    pairs: Iterable[Tuple[Any, Optional[float]]] = file_timestamps
    return TimestampSnapshot({str(path): timestamp for path, timestamp in pairs})

class ChangeDetector:
    """
    Compares the host's current timestamps with those seen on the previous pass.

    A path not seen before is compared against the detector's start time; a path
    reported without a timestamp always counts as changed. When nothing at all
    changed the detector still answers "rebuild": without information from the
    host, skipping a render would be the worse mistake.
    """

    def __init__(self, ledger: DependencyLedger, start_time: Optional[float] = None):
        self.ledger = ledger
        self.start_time: float = time.time() if start_time is None else start_time
        self.prev_timestamps: Dict[str, Optional[float]] = {}

    def changed_files(self, snapshot: TimestampSnapshot) -> List[str]:
        changed: List[str] = []
        for watchfile, timestamp in snapshot.items():
            previous = self.prev_timestamps.get(watchfile)
            previous = self.start_time if previous is None else previous
            current = math.inf if timestamp is None else timestamp
            if previous < current:
                changed.append(watchfile)
        return changed

    def dependencies_updated(self, file_timestamps: Any) -> bool:
        snapshot = snapshot_from_host(file_timestamps)
        changed = self.changed_files(snapshot)
        self.prev_timestamps = dict(snapshot.items())

        if not changed:
            log.debug("no_changed_files_reported_rebuilding", watched=len(snapshot))
            return True
        relevant = self.ledger.contains_any(changed)
        log.debug("changed_files_checked", changed=len(changed), relevant=relevant)
        return relevant
