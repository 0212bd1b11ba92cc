# hbsbuild/templating/helpers.py
"""
Built-in Handlebars helpers, and resolution of user helpers from the 'helpers'
option into named callables.
"""
import importlib.util
import json
import os
import sys
from typing import Any, Callable, Dict, List, NamedTuple, Optional
import structlog

from hbsbuild.core.discovery import glob_paths
from hbsbuild.exceptions import ConfigError

log = structlog.get_logger(__name__)

def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None

def add_helper(this: Any, *values: Any) -> float:
    # {{add price shipping}}; values that are not numbers are skipped.
    numbers = (_as_number(value) for value in values)
    return sum(number for number in numbers if number is not None)

def json_helper(this: Any, value: Any) -> str:
    # serializes a context value, e.g. to inline it into a <script> block.
    return json.dumps(value, default=str)

BUILTIN_HELPERS = {
    "add": add_helper,
    "json": json_helper,
}

class HelperSpec(NamedTuple):
    id: str
    helper_function: Callable[..., Any]
    filepath: Optional[str]

def _load_helper_module(filepath: str) -> object:
    # imports a helper file as an isolated module without touching sys.path.
    helper_id = os.path.splitext(os.path.basename(filepath))[0]
    module_name = f"hbsbuild_helpers.{helper_id}"
    spec = importlib.util.spec_from_file_location(module_name, filepath)
    if spec is None or spec.loader is None:
        raise ConfigError(f"Cannot load helper module {filepath}")

    try:
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise ConfigError(f"Failed to load helper module {filepath}: {exc}") from exc
    return module

def _helper_from_file(filepath: str) -> HelperSpec:
    helper_id = os.path.splitext(os.path.basename(filepath))[0]
    module = _load_helper_module(filepath)
    for attr_name in (helper_id, "helper"):
        candidate = getattr(module, attr_name, None)
        if callable(candidate):
            return HelperSpec(helper_id, candidate, os.path.abspath(filepath))
    raise ConfigError(f"Helper module {filepath} defines neither '{helper_id}' nor 'helper'")

def resolve_helpers(helpers: Dict[str, Any]) -> List[HelperSpec]:
    """
    Callables are registered under their key. Strings are globs of Python files;
    each file becomes a helper named after the file.
    """
    resolved: List[HelperSpec] = []
    for key, source in helpers.items():
        if callable(source):
            resolved.append(HelperSpec(key, source, None))
        elif isinstance(source, str):
            matched = glob_paths(source)
            if not matched:
                log.warning("helper_glob_matched_no_files", key=key, pattern=source)
            resolved.extend(_helper_from_file(filepath) for filepath in matched if filepath.endswith(".py"))
        else:
            raise ConfigError(f"Helper '{key}' must be a callable or a glob pattern, got {type(source).__name__}")
    log.info("helpers_resolved", count=len(resolved))
    return resolved
