from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
import structlog

log = structlog.get_logger(__name__)

DEFAULT_OUTPUT_DIR = "dist"

HelperSource = Union[Callable[..., Any], str]

@dataclass(frozen=True)
class BuildHooks:
    # optional callbacks fired around the render pipeline. every hook receives
    # the template engine first; an unset hook or a None return keeps the value.
    on_before_setup: Optional[Callable[..., Any]] = None
    on_before_add_partials: Optional[Callable[..., Any]] = None
    on_before_compile: Optional[Callable[..., Any]] = None
    on_before_render: Optional[Callable[..., Any]] = None
    on_before_save: Optional[Callable[..., Any]] = None
    on_done: Optional[Callable[..., Any]] = None

    def before_setup(self, engine) -> None:
        if self.on_before_setup is not None:
            self.on_before_setup(engine)

    def before_add_partials(self, engine, partials: Dict[str, str]) -> None:
        if self.on_before_add_partials is not None:
            self.on_before_add_partials(engine, partials)

    def before_compile(self, engine, template_content: str) -> str:
        return _replace_or_keep(self.on_before_compile, template_content, engine, template_content)

    def before_render(self, engine, data: Any) -> Any:
        return _replace_or_keep(self.on_before_render, data, engine, data)

    def before_save(self, engine, result: str, target_filepath: str) -> str:
        return _replace_or_keep(self.on_before_save, result, engine, result, target_filepath)

    def done(self, engine, target_filepath: str) -> None:
        if self.on_done is not None:
            self.on_done(engine, target_filepath)

def _replace_or_keep(hook: Optional[Callable[..., Any]], current: Any, *args: Any) -> Any:
    if hook is None:
        return current
    replacement = hook(*args)
    return current if replacement is None else replacement

@dataclass(frozen=True)
class BuildConfig:
    # holds all options of a builder; immutable for the builder's lifetime.
    entry: str
    output: Optional[str] = None
    data: Any = field(default_factory=dict)
    helpers: Mapping[str, HelperSource] = field(default_factory=dict)
    partials: List[str] = field(default_factory=list)
    hooks: BuildHooks = field(default_factory=BuildHooks)
