# hbsbuild/templating/engine.py
"""
Contains the TemplateEngine class: one pybars compiler together with the
helpers and partials registered for it.

Every builder owns its own engine, so helpers or partials registered by one
builder are never visible to another.
"""
from typing import Any, Callable, Dict, Optional
import pybars # type: ignore
import structlog

from hbsbuild.exceptions import TemplateError

from .helpers import BUILTIN_HELPERS

log = structlog.get_logger(__name__)

class CompiledTemplate:
    """A compiled template; calling it with data renders text."""
    def __init__(self, engine: "TemplateEngine", template_function: Callable[..., Any], source_name: str):
        self.engine = engine
        self.template_function = template_function
        self.source_name = source_name

    def __call__(self, data: Any) -> str:
        try:
            rendered = self.template_function(
                data, helpers=self.engine.helpers, partials=self.engine.partials
            )
        except Exception as e:
            log.error("template_rendering_error_occurred", source=self.source_name, error_message=str(e))
            if isinstance(e, pybars.PybarsError) and "missing" in str(e).lower():
                raise TemplateError(
                    f"Template render failed for '{self.source_name}': a helper or partial might be missing. "
                    f"Pybars detail: {e}") from e
            raise TemplateError(f"Template render failed for '{self.source_name}': {e}") from e
        log.debug("template_rendered_successfully", source=self.source_name)
        return str(rendered)

class TemplateEngine:
    """Manages compilation of Handlebars templates and their helper/partial registries."""
    def __init__(self):
        self.handlebars_compiler = pybars.Compiler()
        self.helpers: Dict[str, Callable[..., Any]] = dict(BUILTIN_HELPERS)
        self.partials: Dict[str, Callable[..., Any]] = {}

    def register_helper(self, name: str, helper_function: Callable[..., Any]) -> None:
        log.debug("registering_helper", name=name)
        self.helpers[name] = helper_function

    def register_partial(self, name: str, partial_source: str) -> None:
        log.debug("registering_partial", name=name)
        self.partials[name] = self._compile_source(partial_source, f"partial:{name}")

    def add_partials(self, partials: Dict[str, str], read_file: Callable[[str], str]) -> None:
        # partials maps a partial name to the file holding its source.
        for name, filepath in partials.items():
            self.register_partial(name, read_file(filepath))

    def compile(self, template_content: str, source_name: Optional[str] = None) -> CompiledTemplate:
        source_name = source_name or "inline_template"
        return CompiledTemplate(self, self._compile_source(template_content, source_name), source_name)

    def _compile_source(self, template_content: str, source_name: str) -> Callable[..., Any]:
        try:
            compiled = self.handlebars_compiler.compile(template_content)
        except Exception as e:
            log.error("template_compilation_failed", source=source_name, error=str(e))
            raise TemplateError(f"Failed to compile template from '{source_name}': {e}") from e
        log.debug("template_compiled_successfully", source=source_name)
        return compiled
