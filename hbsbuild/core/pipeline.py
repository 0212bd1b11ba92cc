# hbsbuild/core/pipeline.py
from typing import Any, Dict, List, Optional
from rich.markup import escape
import structlog

from hbsbuild.config.settings import BuildConfig
from hbsbuild.core.change_detection import ChangeDetector
from hbsbuild.core.data_loader import DataLoader
from hbsbuild.core.discovery import glob_paths
from hbsbuild.core.host import BuildHost, BuildPass, register_file_dependencies
from hbsbuild.core.ledger import DependencyLedger
from hbsbuild.core.output import GeneratedAsset, OutputRouter, RenderResult
from hbsbuild.templating import TemplateEngine, resolve_helpers, resolve_partials
from hbsbuild.util import console, get_target_filepath, strip_cwd

log = structlog.get_logger(__name__)

class HandlebarsBuilder:
    """
    Renders Handlebars entry files on every host build pass whose changed files
    include something this builder read before.

    The builder owns its template engine, so helpers and partials registered
    here never leak into another builder.
    """

    def __init__(self, config: BuildConfig, engine: Optional[TemplateEngine] = None):
        self.config: BuildConfig = config
        self.log = structlog.get_logger(f"{__name__}.{self.__class__.__name__}")
        self.engine = engine if engine is not None else TemplateEngine()
        self.config.hooks.before_setup(self.engine)

        self.ledger = DependencyLedger()
        self.change_detector = ChangeDetector(self.ledger)
        self.data_loader = DataLoader(self.ledger)
        self.router = OutputRouter()
        self.data: Any = None
        self.update_data()

        for helper in resolve_helpers(dict(self.config.helpers)):
            self.engine.register_helper(helper.id, helper.helper_function)
            self.ledger.record(helper.filepath)

    @property
    def assets(self) -> Dict[str, GeneratedAsset]:
        return self.router.assets

    def apply(self, host: BuildHost) -> None:
        host.tap("prepare", self.prepare)
        host.tap("emit", self.emit)

    def prepare(self, build_pass: BuildPass) -> bool:
        # returns False when the pass was skipped because nothing relevant changed.
        if not self.change_detector.dependencies_updated(build_pass.file_timestamps):
            self.log.info("no_relevant_changes_skipping_render")
            return False

        self.load_partials()
        self.compile_all_entry_files(build_pass.output_path)
        return True

    def emit(self, build_pass: BuildPass) -> None:
        register_file_dependencies(build_pass, list(self.ledger))
        for asset_name, asset in self.router.assets.items():
            build_pass.assets[asset_name] = asset
        self.log.debug("generated_files_emitted", count=len(self.router.assets))

    def load_partials(self) -> None:
        partials = resolve_partials(list(self.config.partials))
        self.config.hooks.before_add_partials(self.engine, partials)
        self.engine.add_partials(partials, self.ledger.read_file)

    def update_data(self) -> None:
        self.data = self.data_loader.load(self.config.data)

    def compile_all_entry_files(self, output_path: Optional[str]) -> List[RenderResult]:
        self.update_data()

        entry_files = glob_paths(self.config.entry)
        if not entry_files:
            self.log.warning("no_entry_files_matched", pattern=self.config.entry)
            console.print(f"[yellow]no valid entry files found for {escape(self.config.entry)} -- aborting[/yellow]")
            return []

        self.log.info("compiling_entry_files", count=len(entry_files))
        return [self.compile_entry_file(filepath, output_path) for filepath in entry_files]

    def compile_entry_file(self, source_path: str, output_path: Optional[str]) -> RenderResult:
        target_filepath = get_target_filepath(source_path, self.config.output)
        hooks = self.config.hooks

        template_content = self.ledger.read_file(source_path)
        template_content = hooks.before_compile(self.engine, template_content)
        template = self.engine.compile(template_content, source_name=source_path)

        data = hooks.before_render(self.engine, self.data)
        result = template(data)
        result = hooks.before_save(self.engine, result, target_filepath)

        render_result = self.router.route(source_path, target_filepath, result, output_path)
        hooks.done(self.engine, render_result.target_path)

        console.print(f"[grey50]created output '{escape(strip_cwd(render_result.target_path))}'[/grey50]")
        return render_result
