# hbsbuild/core/discovery/pattern_matching.py
import re
from pathlib import PurePosixPath
from typing import Tuple
import pathspec

from hbsbuild.exceptions import DiscoveryError

_GLOB_MAGIC = re.compile(r"[*?\[]")

def has_magic(pattern: str) -> bool:
    return _GLOB_MAGIC.search(pattern) is not None

def split_glob_pattern(pattern: str) -> Tuple[str, str]:
    """
    Splits a glob into its literal leading directory and the wildcard remainder.

    ``templates/*.hbs`` -> ``("templates", "*.hbs")``;
    ``/srv/site/**/*.hbs`` -> ``("/srv/site", "**/*.hbs")``.
    """
    parts = pattern.replace("\\", "/").split("/")
    base_parts = []
    for part in parts[:-1]:
        if has_magic(part):
            break
        base_parts.append(part)

    base = "/".join(base_parts)
    if base_parts == [""]:
        base = "/"
    return base, "/".join(parts[len(base_parts):])

def compile_glob_to_spec(relative_glob: str) -> pathspec.PathSpec:
    # anchored at the walk root so '*.hbs' does not also match nested folders.
    try:
        return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, ["/" + relative_glob])
    except Exception as e:
        raise DiscoveryError(f"error compiling glob pattern {relative_glob!r}: {e}") from e

def is_path_hidden(relative_path: PurePosixPath) -> bool:
    # like shell globs, wildcards never match dot files or dot folders.
    return any(part.startswith(".") and part not in (".", "..") for part in relative_path.parts)
