# tests/test_templating.py
"""Tests for the template engine, helper resolution and partial resolution."""

import sys
from pathlib import Path

import pytest

from hbsbuild.exceptions import ConfigError, TemplateError
from hbsbuild.templating import TemplateEngine, resolve_helpers, resolve_partials
from hbsbuild.templating.helpers import add_helper, json_helper
from hbsbuild.templating.partials import get_partial_id


class TestTemplateEngine:
    def test_compile_and_render(self):
        template = TemplateEngine().compile("<h1>{{title}}</h1>")
        assert template({"title": "Home"}) == "<h1>Home</h1>"

    def test_registered_helper_is_used(self):
        engine = TemplateEngine()
        engine.register_helper("shout", lambda this, value: value.upper())
        assert engine.compile("{{shout title}}")({"title": "home"}) == "HOME"

    def test_helper_registered_after_compile_is_visible(self):
        engine = TemplateEngine()
        template = engine.compile("{{shout title}}")
        engine.register_helper("shout", lambda this, value: value.upper())
        assert template({"title": "late"}) == "LATE"

    def test_partials(self):
        engine = TemplateEngine()
        engine.register_partial("card", "<b>{{title}}</b>")
        assert engine.compile("<div>{{> card}}</div>")({"title": "Home"}) == "<div><b>Home</b></div>"

    def test_engines_do_not_share_registries(self):
        first, second = TemplateEngine(), TemplateEngine()
        first.register_helper("shout", lambda this, value: value.upper())
        first.register_partial("card", "<b>card</b>")
        assert "shout" in first.helpers
        assert "shout" not in second.helpers
        assert second.partials == {}

    def test_builtin_helpers_available(self):
        engine = TemplateEngine()
        assert {"add", "json"} <= set(engine.helpers)

    def test_builtin_helpers_render(self):
        template = TemplateEngine().compile("{{add price shipping}} {{{json tags}}}")
        assert template({"price": 10, "shipping": "2.5", "tags": ["a"]}) == "12.5 [\"a\"]"

    def test_add_partials_reads_through_callback(self):
        engine = TemplateEngine()
        read = []

        def read_file(path):
            read.append(path)
            return "<i>{{name}}</i>"

        engine.add_partials({"ui/badge": "/partials/ui/badge.hbs"}, read_file)
        assert read == ["/partials/ui/badge.hbs"]
        assert "ui/badge" in engine.partials

    def test_compile_error_is_wrapped(self):
        with pytest.raises(TemplateError, match="broken.hbs"):
            TemplateEngine().compile("{{#if title}}x{{/each}}", source_name="broken.hbs")

    def test_render_error_is_wrapped(self):
        engine = TemplateEngine()

        def failing_helper(this, value):
            raise RuntimeError("helper exploded")

        engine.register_helper("explode", failing_helper)
        with pytest.raises(TemplateError, match="helper exploded"):
            engine.compile("{{explode title}}", source_name="page.hbs")({"title": "x"})


def test_add_helper_ignores_context_and_non_numeric():
    assert add_helper({"ctx": 1}, 1, "2", "x", 3.5) == 6.5
    assert add_helper(None, True, None) == 0


def test_json_helper():
    assert json_helper(None, {"a": [1, 2]}) == '{"a": [1, 2]}'


class TestResolveHelpers:
    def test_callables_keep_their_key(self):
        shout = lambda this, value: value.upper()  # noqa: E731
        specs = resolve_helpers({"shout": shout})
        assert len(specs) == 1
        assert specs[0].id == "shout"
        assert specs[0].helper_function is shout
        assert specs[0].filepath is None

    def test_glob_of_helper_modules(self, tmp_path: Path):
        helpers_dir = tmp_path / "helpers"
        helpers_dir.mkdir()
        (helpers_dir / "shout.py").write_text("def shout(this, value):\n    return value.upper()\n")
        (helpers_dir / "wrap.py").write_text("def helper(this, value):\n    return f'[{value}]'\n")
        (helpers_dir / "README.md").write_text("not a helper")

        specs = resolve_helpers({"project": str(helpers_dir / "*")})

        assert [spec.id for spec in specs] == ["shout", "wrap"]
        assert specs[0].helper_function(None, "hi") == "HI"
        assert specs[1].helper_function(None, "hi") == "[hi]"
        assert specs[0].filepath == str(helpers_dir / "shout.py")

    def test_module_without_helper_function(self, tmp_path: Path):
        (tmp_path / "empty.py").write_text("VALUE = 1\n")
        with pytest.raises(ConfigError, match="neither"):
            resolve_helpers({"project": str(tmp_path / "*.py")})

    def test_module_that_fails_to_import(self, tmp_path: Path):
        (tmp_path / "broken.py").write_text("raise RuntimeError('boom')\n")
        with pytest.raises(ConfigError, match="boom"):
            resolve_helpers({"project": str(tmp_path / "*.py")})
        assert "hbsbuild_helpers.broken" not in sys.modules

    def test_invalid_helper_source(self):
        with pytest.raises(ConfigError):
            resolve_helpers({"bad": 42})

    def test_glob_without_matches(self, tmp_path: Path):
        assert resolve_helpers({"project": str(tmp_path / "none" / "*.py")}) == []


class TestResolvePartials:
    def test_partial_id_is_folder_and_name(self):
        assert get_partial_id("/src/components/button/button.hbs") == "button/button"

    def test_resolve_partials(self, tmp_path: Path):
        for rel in ("components/header/header.hbs", "components/footer/footer.hbs"):
            partial = tmp_path / rel
            partial.parent.mkdir(parents=True, exist_ok=True)
            partial.write_text("<nav/>")

        partials = resolve_partials([str(tmp_path / "components" / "*" / "*.hbs")])

        assert partials == {
            "footer/footer": str(tmp_path / "components" / "footer" / "footer.hbs"),
            "header/header": str(tmp_path / "components" / "header" / "header.hbs"),
        }

    def test_no_patterns(self):
        assert resolve_partials([]) == {}
