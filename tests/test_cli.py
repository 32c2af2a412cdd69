"""
Tests for the frontdoc command-line interface.

Each test runs inside tmp_path so the repository's own pyproject.toml
is not picked up as configuration.
"""

import json

import pytest
import yaml

from frontdoc.cli import EXIT_ERROR, EXIT_FAILED, EXIT_OK, main
from frontdoc.examples import build_example_post

BROKEN = '+++\ntitle = "Broken"\n+++\n\n[a](#nowhere)\n'


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "good.md").write_text(build_example_post(), encoding="utf-8")
    (tmp_path / "broken.md").write_text(BROKEN, encoding="utf-8")
    return tmp_path


class TestCheck:

    def test_good_document(self, workdir, capsys):
        assert main(["check", "good.md"]) == EXIT_OK
        assert "good.md: OK (0 error(s), 0 warning(s))" in capsys.readouterr().out

    def test_broken_document(self, workdir, capsys):
        assert main(["check", "good.md", "broken.md"]) == EXIT_FAILED
        out = capsys.readouterr().out
        assert "broken.md:1: error: Missing required field 'date' [field-missing]" in out
        assert "broken.md:5: error: Link to '#nowhere' does not match any heading [anchor-dangling]" in out
        assert "broken.md: FAILED (2 error(s), 0 warning(s))" in out

    def test_missing_file(self, workdir, capsys):
        assert main(["check", "absent.md"]) == EXIT_ERROR
        assert "absent.md: error:" in capsys.readouterr().err

    def test_undecodable_file(self, workdir, capsys):
        (workdir / "binary.md").write_bytes(b"\xff\xfe+++\n")
        assert main(["check", "binary.md", "good.md"]) == EXIT_ERROR
        assert "binary.md: error:" in capsys.readouterr().err

    def test_directory_argument(self, workdir, capsys):
        (workdir / "posts").mkdir()
        assert main(["check", "posts"]) == EXIT_ERROR
        assert "posts: error:" in capsys.readouterr().err

    def test_malformed_front_matter(self, workdir, capsys):
        (workdir / "bad.md").write_text('+++\ntitle = "x"\n', encoding="utf-8")
        assert main(["check", "bad.md", "good.md"]) == EXIT_ERROR
        assert "Unterminated front matter" in capsys.readouterr().err

    def test_json_output(self, workdir, capsys):
        assert main(["check", "--format", "json", "broken.md"]) == EXIT_FAILED
        results = json.loads(capsys.readouterr().out)
        assert results[0]["path"] == "broken.md"
        assert not results[0]["ok"]
        assert [f["code"] for f in results[0]["findings"]] == ["field-missing", "anchor-dangling"]

    def test_allow_extra_fields_flag(self, workdir):
        (workdir / "extra.md").write_text('+++\ntitle = "x"\ndate = 2025-11-08\ndraft = true\n+++\n', encoding="utf-8")
        assert main(["check", "extra.md"]) == EXIT_FAILED
        assert main(["check", "--allow-extra-fields", "extra.md"]) == EXIT_OK

    def test_strict_flag(self, workdir):
        (workdir / "skip.md").write_text('+++\ntitle = "x"\ndate = 2025-11-08\n+++\n\n## A\n\n#### B\n', encoding="utf-8")
        assert main(["check", "skip.md"]) == EXIT_OK
        assert main(["check", "--strict", "skip.md"]) == EXIT_FAILED

    def test_config_file(self, workdir):
        (workdir / "lenient.toml").write_text('required_fields = ["title"]\n', encoding="utf-8")
        (workdir / "nodate.md").write_text('+++\ntitle = "x"\n+++\n', encoding="utf-8")
        assert main(["check", "nodate.md"]) == EXIT_FAILED
        assert main(["check", "--config", "lenient.toml", "nodate.md"]) == EXIT_OK

    def test_pyproject_in_working_directory(self, workdir):
        (workdir / "pyproject.toml").write_text('[tool.frontdoc]\nrequired_fields = ["title"]\n', encoding="utf-8")
        (workdir / "nodate.md").write_text('+++\ntitle = "x"\n+++\n', encoding="utf-8")
        assert main(["check", "nodate.md"]) == EXIT_OK

    def test_config_error(self, workdir, capsys):
        assert main(["check", "--config", "missing.toml", "good.md"]) == EXIT_ERROR
        assert "config error" in capsys.readouterr().err


def test_outline(workdir, capsys):
    assert main(["outline", "good.md", "--mode", "toc"]) == EXIT_OK
    assert "- [Matching on enums](#matching-on-enums)" in capsys.readouterr().out


def test_outline_to_file(workdir):
    assert main(["outline", "good.md", "--out", "outline.txt"]) == EXIT_OK
    assert (workdir / "outline.txt").read_text(encoding="utf-8").startswith("Patterns by example\n")


def test_export_yaml(workdir, capsys):
    assert main(["export", "good.md", "--to", "yaml"]) == EXIT_OK
    data = yaml.safe_load(capsys.readouterr().out)
    assert data["name"] == "good"
    assert data["front_matter"]["fields"]["title"] == "Patterns by example"


def test_export_json_to_file(workdir):
    assert main(["export", "good.md", "--out", "good.json"]) == EXIT_OK
    data = json.loads((workdir / "good.json").read_text(encoding="utf-8"))
    assert len(data["code_blocks"]) == 3


def test_snippets(workdir, capsys):
    assert main(["snippets", "good.md", "--out", "snips", "--inventory"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "good-01.rs" in out
    assert "match: 1" in out
    assert (workdir / "snips" / "good-03.rs").exists()


def test_missing_file_for_outline(workdir):
    assert main(["outline", "absent.md"]) == EXIT_ERROR
