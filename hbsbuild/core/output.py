# hbsbuild/core/output.py
"""
Routes rendered output either into the host's in-memory asset set or straight
to disk, depending on whether the target lies inside the host's output folder.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional
import structlog

from hbsbuild.exceptions import OutputError

log = structlog.get_logger(__name__)

class GeneratedAsset:
    # in-memory file handed to the host, exposing its contents and size.
    def __init__(self, content: str):
        self._content = content

    def source(self) -> str:
        return self._content

    def size(self) -> int:
        return len(self._content)

    def __repr__(self) -> str:
        return f"GeneratedAsset(size={self.size()})"

@dataclass
class RenderResult:
    source_path: str
    target_path: str
    content: str
    emitted: bool

def write_to_file(output_file_path: Path, text_content: str):
    # writes text content to the specified file path, creating parent folders.
    log.info("writing_output_to_file", path=str(output_file_path))
    try:
        output_file_path.parent.mkdir(parents=True, exist_ok=True)
        output_file_path.write_text(text_content, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"failed to write to file '{output_file_path}': {e}") from e

class OutputRouter:
    def __init__(self):
        self.assets: Dict[str, GeneratedAsset] = {}

    def route(self, source_path: str, target_path: str, content: str, output_path: Optional[str]) -> RenderResult:
        if output_path and output_path in target_path:
            asset_name = target_path.replace(output_path, "", 1).lstrip("/\\")
            self.assets[asset_name] = GeneratedAsset(content)
            log.debug("output_registered_in_memory", asset=asset_name, size=len(content))
            return RenderResult(source_path, asset_name, content, emitted=True)

        # targets outside the host output folder are not served by the host,
        # so they are written directly.
        write_to_file(Path(target_path), content)
        return RenderResult(source_path, target_path, content, emitted=False)
