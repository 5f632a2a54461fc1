"""
Integration tests for CLI.
"""

import io
import logging
import os
import sys

import pytest

from markfmt.cli import expand_glob, main, overrides_from_args, parse_args


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run in tmp_path with no config files and no MARKFMT_* variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for key in list(os.environ):
        if key.startswith("MARKFMT_"):
            monkeypatch.delenv(key)

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield tmp_path
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])
        assert args.files == []
        assert args.glob is None
        assert not args.stdin
        assert not args.save
        assert not args.diff
        assert args.config is None
        assert args.use_spaces is None
        assert args.reorder_attrs is None

    def test_files_positional(self):
        args = parse_args(["a.html", "b.html"])
        assert args.files == ["a.html", "b.html"]

    def test_glob_default_pattern(self):
        assert parse_args(["--glob"]).glob == "**/*.html"

    def test_glob_pattern(self):
        assert parse_args(["-g", "src/**/*.tpl"]).glob == "src/**/*.tpl"

    def test_numbers(self):
        args = parse_args(["--tab-length", "2", "--line-length", "80"])
        assert args.indent_width == 2
        assert args.max_line_width == 80

    def test_toggles(self):
        args = parse_args(["--no-reorder-attrs", "--closing-slash"])
        assert args.reorder_attrs is False
        assert args.closing_slash is True

    def test_tabs(self):
        assert parse_args(["--tabs"]).use_spaces is False
        assert parse_args(["--no-spaces"]).use_spaces is False

    def test_tag_lists(self):
        args = parse_args(["--short-tags", "my-icon, Spacer", "--wrap-ignored-tags", "pre"])
        assert args.void_tags == ["my-icon", "spacer"]
        assert args.verbatim_tags == ["pre"]


class TestOverrides:
    def test_only_given_values(self):
        overrides = overrides_from_args(parse_args(["--line-length", "60", "--no-text-wrap"]))
        assert overrides == {"max_line_width": 60, "text_wrap": False}

    def test_none_given(self):
        assert overrides_from_args(parse_args([])) == {}


class TestExpandGlob:
    def test_sorted_files_only(self, tmp_path):
        (tmp_path / "b.html").write_text("")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "a.html").write_text("")
        (tmp_path / "dir.html").mkdir()

        result = expand_glob("**/*.html", tmp_path)

        assert result == [tmp_path / "b.html", tmp_path / "sub" / "a.html"]

    def test_absolute_pattern(self, tmp_path):
        (tmp_path / "a.html").write_text("")
        (tmp_path / "b.txt").write_text("")

        result = expand_glob(str(tmp_path / "*.html"), tmp_path / "elsewhere")

        assert result == [tmp_path / "a.html"]


class TestMain:
    def test_file_to_stdout(self, tmp_path, capsys):
        path = tmp_path / "page.html"
        path.write_text("<div><p>Hello</p></div>")

        assert main([str(path)]) == 0

        captured = capsys.readouterr()
        assert captured.out == "<div>\n    <p>Hello</p>\n</div>\n"
        assert path.read_text() == "<div><p>Hello</p></div>"

    def test_save_writes_file(self, tmp_path, capsys):
        path = tmp_path / "page.html"
        path.write_text("<div><p>Hello</p></div>")

        assert main([str(path), "--save"]) == 0

        assert path.read_text() == "<div>\n    <p>Hello</p>\n</div>\n"
        assert capsys.readouterr().out == ""

    def test_diff(self, tmp_path, capsys):
        path = tmp_path / "page.html"
        path.write_text("<div><p>Hello</p></div>")

        assert main([str(path), "--diff"]) == 0

        out = capsys.readouterr().out
        assert out.startswith(f"--- {path}")
        assert f"+++ {path} (formatted)" in out
        assert "+    <p>Hello</p>" in out

    def test_flags_reach_formatter(self, tmp_path, capsys):
        path = tmp_path / "page.html"
        path.write_text("<div><img src=a.png></div>")

        assert main([str(path), "--tab-length", "2", "--closing-slash"]) == 0

        assert capsys.readouterr().out == '<div>\n  <img src="a.png" />\n</div>\n'

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.html")]) == 1
        assert "Error: Cannot read" in capsys.readouterr().err

    def test_one_failure_does_not_stop_others(self, tmp_path, capsys):
        good = tmp_path / "good.html"
        good.write_text("<br>")

        assert main([str(tmp_path / "nope.html"), str(good), "--save"]) == 1

        assert good.read_text() == "<br>\n"

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("<span>{{foo}}</span>"))

        assert main(["--stdin"]) == 0

        assert capsys.readouterr().out == "<span>{{ foo }}</span>\n"

    def test_stdin_save_goes_to_stdout(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("<br>"))

        assert main(["--stdin", "--save"]) == 0

        assert capsys.readouterr().out == "<br>\n"

    def test_glob_save(self, tmp_path, capsys):
        (tmp_path / "views").mkdir()
        first = tmp_path / "a.html"
        second = tmp_path / "views" / "b.html"
        other = tmp_path / "notes.txt"
        first.write_text("<ul><li>x</li></ul>")
        second.write_text("<p>y</p>")
        other.write_text("<p>y</p>")

        assert main(["--glob", "--save"]) == 0

        assert first.read_text() == "<ul>\n    <li>x</li>\n</ul>\n"
        assert second.read_text() == "<p>y</p>\n"
        assert other.read_text() == "<p>y</p>"

    def test_absolute_glob(self, tmp_path, capsys):
        (tmp_path / "views").mkdir()
        page = tmp_path / "views" / "page.html"
        page.write_text("<div><br></div>")

        assert main(["--glob", str(tmp_path / "views" / "*.html")]) == 0

        assert capsys.readouterr().out == "<div>\n    <br>\n</div>\n"

    def test_absolute_recursive_glob_save(self, tmp_path, capsys):
        (tmp_path / "views").mkdir()
        page = tmp_path / "views" / "page.html"
        page.write_text("<p>x</p>")

        assert main(["--glob", str(tmp_path / "**" / "*.html"), "--save"]) == 0

        assert page.read_text() == "<p>x</p>\n"

    def test_project_config_file(self, tmp_path, capsys):
        (tmp_path / ".markfmt.toml").write_text("[format]\nindent_width = 2\n")
        path = tmp_path / "page.html"
        path.write_text("<div><br></div>")

        assert main([str(path)]) == 0

        assert capsys.readouterr().out == "<div>\n  <br>\n</div>\n"

    def test_flag_beats_config_file(self, tmp_path, capsys):
        (tmp_path / ".markfmt.toml").write_text("indent_width = 2\n")
        path = tmp_path / "page.html"
        path.write_text("<div><br></div>")

        assert main([str(path), "--tab-length", "3"]) == 0

        assert capsys.readouterr().out == "<div>\n   <br>\n</div>\n"

    def test_bad_config_path(self, tmp_path, capsys):
        path = tmp_path / "page.html"
        path.write_text("<br>")

        assert main([str(path), "--config", str(tmp_path / "missing.toml")]) == 1

        assert "Error: Cannot read config file" in capsys.readouterr().err

    def test_invalid_config_value(self, tmp_path, capsys):
        config = tmp_path / "bad.toml"
        config.write_text('max_line_width = "wide"\n')

        assert main(["x.html", "--config", str(config)]) == 1

        assert "max_line_width" in capsys.readouterr().err

    def test_no_input(self, capsys):
        assert main([]) == 1
        assert "No file path specified" in capsys.readouterr().err
