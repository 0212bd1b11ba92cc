# hbsbuild/core/discovery/walker.py
import os
from pathlib import PurePosixPath
from typing import List
import structlog

from hbsbuild.exceptions import DiscoveryError
from .pattern_matching import compile_glob_to_spec, has_magic, is_path_hidden, split_glob_pattern

log = structlog.get_logger(__name__)

def _raise_walk_error(error: OSError):
    raise DiscoveryError(f"failed to read directory '{error.filename}': {error}") from error

def glob_paths(pattern: str) -> List[str]:
    """
    Returns the files matching a glob, sorted, in the same form as the pattern:
    a relative pattern yields relative paths, an absolute one absolute paths.

    A missing base folder simply matches nothing; any other I/O error while
    walking raises DiscoveryError.
    """
    if not has_magic(pattern):
        return [pattern] if os.path.isfile(pattern) else []

    base, relative_glob = split_glob_pattern(pattern)
    walk_root = base or "."
    if not os.path.isdir(walk_root):
        log.debug("glob_base_directory_missing", pattern=pattern, base=walk_root)
        return []

    spec = compile_glob_to_spec(relative_glob)
    matches: List[str] = []
    for root, dirs, files in os.walk(walk_root, topdown=True, onerror=_raise_walk_error):
        rel_root = PurePosixPath(os.path.relpath(root, walk_root).replace(os.sep, "/"))
        dirs[:] = sorted(d for d in dirs if not is_path_hidden(rel_root / d))

        for file_name in files:
            rel_path = rel_root / file_name
            if is_path_hidden(rel_path):
                continue
            if spec.match_file(rel_path.as_posix()):
                matches.append(rel_path.as_posix() if not base else f"{base.rstrip('/')}/{rel_path.as_posix()}")

    log.debug("glob_resolved", pattern=pattern, matches=len(matches))
    return sorted(matches)
