# hbsbuild/templating/__init__.py
"""
Templating module for hbsbuild.

Provides the TemplateEngine wrapping pybars, and resolution of helpers and
partials from the builder options.
"""
from .engine import TemplateEngine, CompiledTemplate
from .helpers import resolve_helpers, HelperSpec
from .partials import resolve_partials

__all__ = [
    "TemplateEngine",
    "CompiledTemplate",
    "resolve_helpers",
    "HelperSpec",
    "resolve_partials",
]
