# hbsbuild/core/host.py
"""
The build-host side of the contract: per-pass state handed to a builder, a
minimal phase registry, and a local host that drives passes on disk.
"""
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence
from rich.markup import escape
from watchfiles import DefaultFilter, watch as watch_changes
import structlog

from hbsbuild.exceptions import HbsBuildError
from hbsbuild.util import console
from .output import write_to_file

log = structlog.get_logger(__name__)

PHASES = ("prepare", "emit")

@dataclass
class BuildPass:
    """
    State of one host build pass.

    file_timestamps may be a mapping of path -> timestamp or an iterable of
    (path, timestamp) pairs; file_dependencies may be a set or a list.
    assets maps names to objects exposing source() and size().
    """
    output_path: str
    file_timestamps: Any = None
    file_dependencies: Any = field(default_factory=set)
    assets: Dict[str, Any] = field(default_factory=dict)

def register_file_dependencies(build_pass: BuildPass, paths: Iterable[str]) -> None:
    # set-like collections are extended in place; plain lists are replaced.
    if hasattr(build_pass.file_dependencies, "add"):
        for path in paths:
            build_pass.file_dependencies.add(path)
    else:
        build_pass.file_dependencies = list(build_pass.file_dependencies) + list(paths)

class BuildHost:
    """Runs the handlers tapped into each phase, in order, once per pass."""
    def __init__(self):
        self.handlers: Dict[str, List[Callable[[BuildPass], Any]]] = {phase: [] for phase in PHASES}

    def tap(self, phase: str, handler: Callable[[BuildPass], Any]) -> None:
        if phase not in self.handlers:
            raise ValueError(f"unknown build phase '{phase}', expected one of {PHASES}")
        self.handlers[phase].append(handler)

    def run_pass(self, build_pass: BuildPass) -> BuildPass:
        for phase in PHASES:
            for handler in self.handlers[phase]:
                handler(build_pass)
        return build_pass

class LocalBuildHost(BuildHost):
    """
    A host for running builders outside a bundler.

    Timestamps are taken with os.stat for every file registered as a dependency
    on the previous pass plus any path reported as changed (a missing file
    reports no timestamp), and emitted assets are written below output_path
    once all phases ran. watch() keeps running passes as files change.
    """
    def __init__(self, output_path: Path):
        super().__init__()
        self.output_path = Path(output_path)
        self.watched_files: List[str] = []

    def snapshot_timestamps(self, changed_paths: Iterable[str] = ()) -> Dict[str, Optional[float]]:
        timestamps: Dict[str, Optional[float]] = {}
        for watchfile in [*self.watched_files, *changed_paths]:
            try:
                timestamps[watchfile] = os.stat(watchfile).st_mtime
            except FileNotFoundError:
                timestamps[watchfile] = None
        return timestamps

    def run_pass(self, build_pass: Optional[BuildPass] = None, changed_paths: Iterable[str] = ()) -> BuildPass:
        if build_pass is None:
            build_pass = BuildPass(output_path=str(self.output_path), file_timestamps=self.snapshot_timestamps(changed_paths))
        super().run_pass(build_pass)

        self.watched_files = sorted(set(build_pass.file_dependencies))
        for asset_name, asset in build_pass.assets.items():
            write_to_file(self.output_path / asset_name, asset.source())
        log.info("build_pass_finished", assets=len(build_pass.assets), watched=len(self.watched_files))
        return build_pass

    def watch_filter(self) -> DefaultFilter:
        # emitted assets are rewritten on every pass and must not trigger the next one.
        return DefaultFilter(ignore_paths=[str(self.output_path.resolve())])

    def watch(self, roots: Optional[Sequence[Path]] = None, stop_event: Optional[threading.Event] = None,
              debounce: int = 300, step: int = 100) -> int:
        """
        Runs a first pass, then one pass per batch of filesystem changes below
        roots (default: the working directory) until stop_event is set.

        Failed passes are reported and watching goes on. Returns the number of
        passes that ran.
        """
        roots = list(roots) if roots else [Path.cwd()]
        passes = 1
        self._run_reporting_errors()

        log.info("watch_started", roots=[str(root) for root in roots])
        for raw_changes in watch_changes(*roots, watch_filter=self.watch_filter(), stop_event=stop_event,
                                         debounce=debounce, step=step):
            changed = sorted({os.path.abspath(path) for _, path in raw_changes})
            log.info("watch_changes_detected", count=len(changed))
            self._run_reporting_errors(changed)
            passes += 1
        return passes

    def _run_reporting_errors(self, changed_paths: Iterable[str] = ()) -> None:
        try:
            self.run_pass(changed_paths=changed_paths)
        except (HbsBuildError, OSError) as e:
            log.error("build_pass_failed", error_type=type(e).__name__, message=str(e))
            console.print(f"[red]Error: {escape(str(e))}[/red]")
