# tests/test_config_loader.py
"""
Tests for loading build options from TOML files and profiles.
"""
import pytest
from pathlib import Path

from hbsbuild.config import loader
from hbsbuild.config.loader import (
    build_config_from_options, load_and_merge_configs,
    resolve_output_dir, resolve_profile_options,
)
from hbsbuild.config.settings import BuildConfig, BuildHooks
from hbsbuild.exceptions import ConfigError


@pytest.fixture
def user_config(tmp_path: Path, monkeypatch) -> Path:
    user_file = tmp_path / "user" / "config.toml"
    monkeypatch.setattr(loader, "USER_CONFIG_FILE", user_file)
    return user_file


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    proj = tmp_path / "project"
    proj.mkdir()
    return proj


def test_no_files_gives_empty_options(user_config: Path, project_dir: Path):
    assert load_and_merge_configs(project_dir) == {}


def test_project_file_overrides_user_file(user_config: Path, project_dir: Path):
    user_config.parent.mkdir(parents=True)
    user_config.write_text('output_dir = "public"\nentry = "user/*.hbs"\n')
    (project_dir / ".hbsbuild.toml").write_text('entry = "templates/*.hbs"\n')

    merged = load_and_merge_configs(project_dir)

    assert merged["entry"] == "templates/*.hbs"
    assert merged["output_dir"] == "public"


def test_pyproject_tool_table(user_config: Path, project_dir: Path):
    (project_dir / "pyproject.toml").write_text(
        '[project]\nname = "site"\n\n[tool.hbsbuild]\nentry = "src/*.hbs"\npartials = ["src/partials/*/*.hbs"]\n'
    )
    merged = load_and_merge_configs(project_dir)
    assert merged == {"entry": "src/*.hbs", "partials": ["src/partials/*/*.hbs"]}


def test_first_project_file_wins(user_config: Path, project_dir: Path):
    (project_dir / ".hbsbuild.toml").write_text('entry = "dot/*.hbs"\n')
    (project_dir / "hbsbuild.toml").write_text('entry = "plain/*.hbs"\n')
    assert load_and_merge_configs(project_dir)["entry"] == "dot/*.hbs"


def test_invalid_toml_is_ignored(user_config: Path, project_dir: Path):
    (project_dir / ".hbsbuild.toml").write_text("entry = [unclosed\n")
    (project_dir / "hbsbuild.toml").write_text('entry = "fallback/*.hbs"\n')
    assert load_and_merge_configs(project_dir)["entry"] == "fallback/*.hbs"


def test_profiles_are_merged(user_config: Path, project_dir: Path):
    user_config.parent.mkdir(parents=True)
    user_config.write_text('[profiles.mine]\noutput = "out/[name].txt"\n')
    (project_dir / ".hbsbuild.toml").write_text('entry = "a/*.hbs"\n\n[profiles.docs]\nentry = "docs/*.hbs"\n')

    merged = load_and_merge_configs(project_dir)

    assert set(merged["profiles"]) == {"mine", "docs"}


class TestResolveProfileOptions:
    RAW = {
        "entry": "templates/*.hbs",
        "data": {"title": "Home"},
        "unknown_key": True,
        "profiles": {"docs": {"entry": "docs/*.hbs", "output": "dist/docs/[name].html"}},
    }

    def test_without_profile(self):
        assert resolve_profile_options(self.RAW, None) == {"entry": "templates/*.hbs", "data": {"title": "Home"}}

    def test_with_profile(self):
        options = resolve_profile_options(self.RAW, "docs")
        assert options["entry"] == "docs/*.hbs"
        assert options["output"] == "dist/docs/[name].html"
        assert options["data"] == {"title": "Home"}

    def test_missing_profile(self):
        with pytest.raises(ConfigError, match="nope"):
            resolve_profile_options(self.RAW, "nope")


class TestBuildConfigFromOptions:
    def test_full_options(self):
        config = build_config_from_options({
            "entry": "templates/*.hbs",
            "output": "dist/[name].html",
            "data": "data.json",
            "helpers": {"project": "helpers/*.py"},
            "partials": "partials/*/*.hbs",
        })
        assert config == BuildConfig(
            entry="templates/*.hbs",
            output="dist/[name].html",
            data="data.json",
            helpers={"project": "helpers/*.py"},
            partials=["partials/*/*.hbs"],
        )
        assert config.hooks == BuildHooks()

    def test_defaults(self):
        config = build_config_from_options({"entry": "*.hbs"})
        assert config.output is None
        assert config.data == {}
        assert config.helpers == {}
        assert config.partials == []

    @pytest.mark.parametrize("options", [{}, {"entry": ""}, {"entry": 3}])
    def test_entry_required(self, options):
        with pytest.raises(ConfigError):
            build_config_from_options(options)

    def test_helpers_must_be_a_table(self):
        with pytest.raises(ConfigError):
            build_config_from_options({"entry": "*.hbs", "helpers": ["a.py"]})


def test_config_is_immutable():
    config = BuildConfig(entry="*.hbs")
    with pytest.raises(AttributeError):
        config.entry = "other"


def test_resolve_output_dir(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert resolve_output_dir({}) == (tmp_path / "dist").resolve()
    assert resolve_output_dir({"output_dir": "public"}) == (tmp_path / "public").resolve()
