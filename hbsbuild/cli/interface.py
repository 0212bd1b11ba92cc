# hbsbuild/cli/interface.py
import sys
from typing import Any, Dict, Optional, Tuple

import click
from click_option_group import optgroup
import structlog

from hbsbuild import __version__ as app_version
from hbsbuild.config.loader import (
    load_and_merge_configs, resolve_profile_options,
    build_config_from_options, resolve_output_dir
)
from hbsbuild.config.settings import DEFAULT_OUTPUT_DIR
from hbsbuild.core.host import LocalBuildHost
from hbsbuild.core.pipeline import HandlebarsBuilder
from hbsbuild.exceptions import HbsBuildError, ConfigError
from hbsbuild.logging_setup import configure_logging

log = structlog.get_logger(__name__)

def _parse_helper_args(helper_args: Tuple[str, ...]) -> Dict[str, str]:
    helpers: Dict[str, str] = {}
    for raw in helper_args:
        if "=" not in raw:
            raise ConfigError(f"invalid --helper value '{raw}', expected NAME=GLOB")
        name, pattern = raw.split("=", 1)
        helpers[name.strip()] = pattern.strip()
    return helpers

def _collect_cli_overrides(entry: Optional[str], cli_params: Dict[str, Any]) -> Dict[str, Any]:
    # only values actually given on the command line override file settings.
    overrides: Dict[str, Any] = {}
    if entry: overrides["entry"] = entry
    if cli_params.get("output_template"): overrides["output"] = cli_params["output_template"]
    if cli_params.get("data") is not None: overrides["data"] = cli_params["data"]
    if cli_params.get("helper_args"): overrides["helpers"] = _parse_helper_args(cli_params["helper_args"])
    if cli_params.get("partial_patterns"): overrides["partials"] = list(cli_params["partial_patterns"])
    if cli_params.get("output_dir"): overrides["output_dir"] = cli_params["output_dir"]
    return overrides

def _run_build_flow(options: Dict[str, Any], watch: bool = False):
    config = build_config_from_options(options)
    output_dir = resolve_output_dir(options)
    log.info("build_flow_started", entry=config.entry, output_dir=str(output_dir))

    host = LocalBuildHost(output_dir)
    builder = HandlebarsBuilder(config)
    builder.apply(host)

    if watch:
        click.secho(f"Watching for changes, writing emitted assets to {output_dir}. Press Ctrl+C to stop.", fg="cyan", err=True)
        try:
            passes = host.watch()
        except KeyboardInterrupt:
            passes = None
        log.info("watch_stopped", passes=passes)
        click.secho("Info: stopped watching.", fg="cyan", err=True)
        return

    build_pass = host.run_pass()

    click.secho(
        f"Info: {len(build_pass.assets)} asset(s) emitted to {output_dir}, "
        f"{len(set(build_pass.file_dependencies))} file dependencies tracked.",
        fg="cyan", err=True,
    )

@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("entry", required=False)
@optgroup.group("Template Options", help="What to render and where to write it.")
@optgroup.option("-o", "--output", "output_template", default=None, metavar="TEMPLATE", help="Output path template; '[name]' is replaced by the entry file name. Default: entry path without extension.")
@optgroup.option("-d", "--data", "data", default=None, metavar="VALUE_OR_PATH", help="Path to a JSON data file, or a literal string used as data.")
@optgroup.option("-H", "--helper", "helper_args", multiple=True, metavar="NAME=GLOB", help="Glob of Python helper modules to register.")
@optgroup.option("-p", "--partials", "partial_patterns", multiple=True, metavar="GLOB", help="Glob of partial templates to register.")
@optgroup.option("--output-dir", "output_dir", default=None, help=f"Managed output directory for emitted files. Default: {DEFAULT_OUTPUT_DIR}.")
@optgroup.option("-w", "--watch", "watch", is_flag=True, default=False, help="Keep running, re-rendering whenever a file the templates depend on changes.")
@optgroup.group("Application Behavior", help="Configuration profiles and logging.")
@optgroup.option("--config-profile", "active_config_profile_name", default=None, help="Load a profile from config file(s).")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--force-json-logs", "force_json_logs_cli", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, package_name="hbsbuild", prog_name="hbsbuild", help="Show version and exit.")
def main_cli(entry: Optional[str], **cli_params: Any):
    """hbsbuild: Render Handlebars templates matched by ENTRY, re-rendering
    only when a template, partial, helper or data file changed."""

    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs_cli", False))

    log.debug("cli_command_invoked", entry=entry, params=cli_params)

    try:
        raw_configs_from_toml_files = load_and_merge_configs()
        options = resolve_profile_options(raw_configs_from_toml_files, cli_params.get("active_config_profile_name"))
        options.update(_collect_cli_overrides(entry, cli_params))
        _run_build_flow(options, watch=cli_params.get("watch", False))
    except HbsBuildError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except OSError as e:
        log.error("file_access_error_in_cli", filename=getattr(e, "filename", None), message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
