from pathlib import Path

from click.testing import CliRunner

from staticblocks import __version__
from staticblocks.builder import BuildError, BuildResult, BuiltPage
from staticblocks.cli import cli


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_build_reports_page_count(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    called = {}

    def fake_build_site(root):
        called["root"] = root
        return BuildResult(
            pages=[BuiltPage("index", "en", "index.html"), BuiltPage("index", "de", "de/index.html")],
            output_dir=root / "dist",
        )

    monkeypatch.setattr("staticblocks.builder.build_site", fake_build_site)
    result = CliRunner().invoke(cli, ["build", "--verbose"], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Built 2 pages" in result.output
    assert called["root"] == Path.cwd()


def test_cli_build_failure_shows_file(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    def failing_build_site(root):
        raise BuildError(root / "src" / "pages" / "about.yaml", "Template not found: x.html")

    monkeypatch.setattr("staticblocks.builder.build_site", failing_build_site)
    result = CliRunner().invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert "about.yaml" in result.output
    assert "Template not found: x.html" in result.output


def test_cli_build_outside_project(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["build"])
    assert result.exit_code == 1
    assert "staticblocks.yaml not found" in result.output


def test_cli_build_real_project(monkeypatch, tmp_path):
    (tmp_path / "staticblocks.yaml").write_text("icons: lucide\n", encoding="utf-8")
    (tmp_path / "src" / "pages").mkdir(parents=True)
    (tmp_path / "src" / "templates").mkdir()
    (tmp_path / "src" / "templates" / "default.html").write_text(
        "<main>{{icon:star}} {{page.title}}</main>", encoding="utf-8"
    )
    (tmp_path / "src" / "pages" / "index.yaml").write_text("title: Home\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["build"], catch_exceptions=False)
    assert result.exit_code == 0
    html = (tmp_path / "dist" / "index.html").read_text(encoding="utf-8")
    assert html == '<main><i data-lucide="star"></i> Home</main>'


def test_module_main_entrypoint():
    from staticblocks.__main__ import main

    assert callable(main)
