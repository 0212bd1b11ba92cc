# hbsbuild/config/loader.py
"""
Handles loading and merging of build options from TOML files, and turning the
merged options into a BuildConfig.
"""
import toml
from pathlib import Path
from typing import Dict, Any, Optional
import structlog

from hbsbuild.exceptions import ConfigError

from .settings import BuildConfig, DEFAULT_OUTPUT_DIR

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".hbsbuild.toml", "hbsbuild.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "hbsbuild"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

OPTION_KEYS = ("entry", "output", "data", "helpers", "partials", "output_dir")

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file(): return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
        return data.get("tool", {}).get("hbsbuild", {}) if file_path.name == "pyproject.toml" else data
    except (toml.TomlDecodeError, OSError) as e:
        log.error("config_file_load_error", path=str(file_path), error=str(e))
        return {}

def load_and_merge_configs(project_dir: Optional[Path] = None) -> Dict[str, Any]:
    # user-level settings first, then the first project file found wins on top.
    project_dir = project_dir or Path.cwd()
    merged_toml_data: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        merged_toml_data.update(_load_toml_file_data(USER_CONFIG_FILE))

    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = project_dir / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            continue
        log.info("loading_project_local_config", path=str(candidate))
        user_profiles = merged_toml_data.get("profiles", {})
        project_profiles = project_settings.pop("profiles", {})
        if isinstance(user_profiles, dict) and isinstance(project_profiles, dict):
            user_profiles.update(project_profiles)
            if user_profiles:
                merged_toml_data["profiles"] = user_profiles
        elif isinstance(project_profiles, dict) and project_profiles:
            merged_toml_data["profiles"] = project_profiles
        merged_toml_data.update(project_settings)
        break
    if not merged_toml_data: log.debug("no_configuration_files_loaded")
    return merged_toml_data

def resolve_profile_options(raw_configs: Dict[str, Any], profile_name: Optional[str]) -> Dict[str, Any]:
    """Flattens file settings and an optional named profile into plain options."""
    options = {k: raw_configs[k] for k in OPTION_KEYS if k in raw_configs}
    if not profile_name:
        return options

    profile_values = raw_configs.get("profiles", {}).get(profile_name)
    if profile_values is None:
        raise ConfigError(f"profile '{profile_name}' not found in configuration files")
    log.info("applying_profile_settings", profile=profile_name)
    options.update({k: profile_values[k] for k in OPTION_KEYS if k in profile_values})
    return options

def build_config_from_options(options: Dict[str, Any]) -> BuildConfig:
    # validates merged options. hooks are python callables, so only the api sets them.
    entry = options.get("entry")
    if not entry or not isinstance(entry, str):
        raise ConfigError("an 'entry' glob pattern is required")

    helpers = options.get("helpers") or {}
    if not isinstance(helpers, dict):
        raise ConfigError(f"'helpers' must be a table of name = glob, got {type(helpers).__name__}")

    partials = options.get("partials") or []
    if isinstance(partials, str):
        partials = [partials]

    data = options.get("data")
    return BuildConfig(
        entry=entry,
        output=options.get("output") or None,
        data={} if data is None else data,
        helpers=dict(helpers),
        partials=list(partials),
    )

def resolve_output_dir(options: Dict[str, Any]) -> Path:
    return Path(options.get("output_dir") or DEFAULT_OUTPUT_DIR).resolve()
