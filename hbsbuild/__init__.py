"""
hbsbuild: incremental Handlebars template builds for build pipelines.
"""
__version__ = "0.1.0"

from hbsbuild.config.settings import BuildConfig, BuildHooks
from hbsbuild.core.host import BuildHost, BuildPass, LocalBuildHost
from hbsbuild.core.pipeline import HandlebarsBuilder
from hbsbuild.templating import TemplateEngine

__all__ = [
    "__version__",
    "BuildConfig",
    "BuildHooks",
    "BuildHost",
    "BuildPass",
    "LocalBuildHost",
    "HandlebarsBuilder",
    "TemplateEngine",
]
