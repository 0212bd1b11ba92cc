# hbsbuild/templating/partials.py
import os
from typing import Dict, List
import structlog

from hbsbuild.core.discovery import glob_paths

log = structlog.get_logger(__name__)

def get_partial_id(filepath: str) -> str:
    # 'src/components/button/button.hbs' is used as {{> button/button}}
    parent_name = os.path.basename(os.path.dirname(os.path.abspath(filepath)))
    stem = os.path.splitext(os.path.basename(filepath))[0]
    return f"{parent_name}/{stem}"

def resolve_partials(patterns: List[str]) -> Dict[str, str]:
    """Maps partial names to the files they are read from."""
    partials: Dict[str, str] = {}
    for pattern in patterns:
        for filepath in glob_paths(pattern):
            partials[get_partial_id(filepath)] = os.path.abspath(filepath)
    log.debug("partials_resolved", count=len(partials))
    return partials
