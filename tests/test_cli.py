"""
Tests for reporting and the command line interface.
"""

import json

import pytest

from conftest import lint
from workerlint import __version__
from workerlint.cli import main
from workerlint.lint.reporting import Reporter


class TestReporter:
    """Test output rendering."""

    def test_clean(self):
        reporter = Reporter()
        reporter.files_checked = 3
        assert not reporter.has_problems
        assert reporter.render_human() == "Checked 3 file(s): OK - no problems"

    def test_human(self):
        reporter = Reporter()
        reporter.files_checked = 1
        reporter.extend(lint("window.fetch();\nwindow.atob('');\n", "app.js"))
        text = reporter.render_human()
        assert "no-window-prefix app.js:1:0:" in text
        assert "Found 2 problem(s) in 1 checked file(s)" in text
        assert "  no-window-prefix: 2" in text
        assert reporter.counts_by_code() == {"no-window-prefix": 2}

    def test_json(self):
        reporter = Reporter()
        reporter.extend(lint("window.fetch();", "app.js"))
        data = json.loads(reporter.render_json())
        assert [d["code"] for d in data] == ["no-window-prefix"]
        assert data[0]["line"] == 1


class TestLintCommand:
    """Test `workerlint lint`."""

    def test_problems_exit_1(self, project_dir, capsys):
        assert main(["lint", str(project_dir)]) == 1
        out = capsys.readouterr().out
        assert "app.js:1:0" in out
        assert "worker.ts:1:18" in out
        assert "node_modules" not in out
        assert "Found 2 problem(s) in 3 checked file(s)" in out

    def test_defaults_to_current_directory(self, project_dir, capsys, monkeypatch):
        monkeypatch.chdir(project_dir)
        assert main(["lint"]) == 1
        assert "Found 2 problem(s) in 3 checked file(s)" in capsys.readouterr().out

    def test_clean_exit_0(self, tmp_path, capsys):
        (tmp_path / "ok.js").write_text("globalThis.fetch('/');\n", encoding="utf-8")
        assert main(["lint", str(tmp_path)]) == 0
        assert "OK - no problems" in capsys.readouterr().out

    def test_json_output(self, project_dir, capsys):
        assert main(["lint", str(project_dir), "--json", "-j", "2"]) == 1
        data = json.loads(capsys.readouterr().out)
        assert len(data) == 2

    def test_rules_exclude(self, project_dir, capsys):
        assert main(["lint", str(project_dir), "--rules-exclude", "no-window-prefix"]) == 0

    def test_config_file_applies(self, project_dir, capsys):
        (project_dir / "workerlint.toml").write_text('exclude-dirs = ["src", "node_modules"]\n', encoding="utf-8")
        assert main(["lint", str(project_dir)]) == 0
        assert "Checked 0 file(s)" in capsys.readouterr().out

    def test_config_error_exit_2(self, project_dir, capsys):
        (project_dir / "workerlint.toml").write_text("jobs = 0\n", encoding="utf-8")
        assert main(["lint", str(project_dir)]) == 2
        assert "Config error" in capsys.readouterr().err

    def test_parse_error_reported(self, tmp_path, capsys):
        (tmp_path / "bad.js").write_text("window.fetch(;\n", encoding="utf-8")
        assert main(["lint", str(tmp_path)]) == 1
        assert "parse-error" in capsys.readouterr().out


class TestOtherCommands:
    """Test `rules`, `parse` and top-level options."""

    def test_rules(self, capsys):
        assert main(["rules"]) == 0
        assert "no-window-prefix  [recommended]" in capsys.readouterr().out

    def test_rules_docs(self, capsys):
        assert main(["rules", "--docs"]) == 0
        assert "self" in capsys.readouterr().out

    def test_rules_json(self, capsys):
        assert main(["rules", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data[0]["code"] == "no-window-prefix"
        assert data[0]["tags"] == ["recommended"]

    def test_parse(self, tmp_path, capsys):
        path = tmp_path / "a.ts"
        path.write_text("let a: number = 1;\n// note\nfunction f() {}\n", encoding="utf-8")
        assert main(["parse", str(path), "--details"]) == 0
        out = capsys.readouterr().out
        assert "(typescript)" in out
        assert "Top-level statements: 2" in out
        assert "function_declaration (line 3)" in out

    def test_parse_error(self, tmp_path, capsys):
        path = tmp_path / "bad.js"
        path.write_text("const = 1;\n", encoding="utf-8")
        assert main(["parse", str(path)]) == 1
        assert "Parse error" in capsys.readouterr().err

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out
