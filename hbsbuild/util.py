import os
from typing import Optional

from rich.console import Console
import structlog

log = structlog.get_logger(__name__)
utf8_bom = b"\xef\xbb\xbf"

# user-facing progress lines go to stderr so stdout stays clean for pipes;
# soft_wrap keeps each line whole however narrow the terminal is.
console = Console(stderr=True, highlight=False, soft_wrap=True)

def strip_utf8_bom(data: bytes) -> bytes:
    # removes the utf-8 byte order mark from byte data if present.
    if data.startswith(utf8_bom):
        return data[len(utf8_bom):]
    return data

def get_target_filepath(filepath: str, output_template: Optional[str] = None) -> str:
    """
    Returns the path a rendered entry file is written to.

    Without an output template the source path is kept and only its extension
    is dropped (``templates/index.hbs`` -> ``templates/index``). With a template,
    every ``[name]`` token is replaced by the source base name without extension
    (``dist/[name].html`` -> ``dist/index.html``).
    """
    if output_template is None:
        return os.path.splitext(filepath)[0]

    file_name = os.path.splitext(os.path.basename(filepath))[0]
    return output_template.replace("[name]", file_name)

def strip_cwd(filepath: str) -> str:
    # shortens a path for display by removing the working directory prefix.
    return filepath.replace(f"{os.getcwd()}{os.sep}", "", 1)
