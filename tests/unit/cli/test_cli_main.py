"""
Unit Tests for the vibecoding CLI commands
"""
import argparse
import io
import pytest
from rich.console import Console

import cli.main
from cli.main import chunk_text, create_parser, load_project, main, resolve_output_path, run_parse, run_preview

from mocks.mock_deepseek import SAMPLE_PROJECT_STREAM


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120)


class TestHelpers:
    """Test argument parsing and path helpers"""

    def test_parser_subcommands(self):
        args = create_parser().parse_args(["parse", "out.txt", "-o", "dir", "--chunk-size", "3"])

        assert args.command == "parse"
        assert args.transcript == "out.txt"
        assert args.output == "dir"
        assert args.chunk_size == 3

    def test_chunk_text(self):
        assert chunk_text("abcdefg", 3) == ["abc", "def", "g"]
        assert chunk_text("ab", 0) == ["a", "b"]

    def test_output_path_inside_directory(self, tmp_path):
        assert resolve_output_path(tmp_path, "src/app.js") == (tmp_path / "src" / "app.js").resolve()
        assert resolve_output_path(tmp_path, "/abs/app.js") == (tmp_path / "abs" / "app.js").resolve()

    def test_output_path_escape_rejected(self, tmp_path):
        assert resolve_output_path(tmp_path / "out", "../../etc/passwd") is None


class TestParseCommand:
    """Test `vibecoding parse`"""

    @pytest.mark.asyncio
    async def test_writes_parsed_files(self, tmp_path, console):
        transcript = tmp_path / "transcript.txt"
        transcript.write_text(SAMPLE_PROJECT_STREAM, encoding="utf-8")
        output = tmp_path / "out"

        args = argparse.Namespace(transcript=str(transcript), output=str(output), chunk_size=4, verbose=False)
        assert await run_parse(args, console) == 0

        assert (output / "css" / "style.css").read_text(encoding="utf-8") == "button { font-size: 2rem; }"
        assert (output / "js" / "app.js").exists()
        assert "index.html" in console.file.getvalue()


class TestPreviewCommand:
    """Test `vibecoding preview`"""

    @pytest.mark.asyncio
    async def test_load_project_skips_binary_and_vendor(self, tmp_path):
        (tmp_path / "index.html").write_text("<p></p>", encoding="utf-8")
        (tmp_path / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe")
        (tmp_path / "node_modules").mkdir()
        (tmp_path / "node_modules" / "lib.js").write_text("x", encoding="utf-8")

        files = await load_project(tmp_path)
        assert [f.path for f in files] == ["index.html"]
        assert files[0].language == "html"

    @pytest.mark.asyncio
    async def test_writes_inlined_html(self, tmp_path, console):
        project = tmp_path / "site"
        (project / "css").mkdir(parents=True)
        (project / "index.html").write_text('<link rel="stylesheet" href="css/a.css">', encoding="utf-8")
        (project / "css" / "a.css").write_text("h1{}", encoding="utf-8")
        output = tmp_path / "preview.html"

        args = argparse.Namespace(directory=str(project), output=str(output), verbose=False)
        assert await run_preview(args, console) == 0
        assert output.read_text(encoding="utf-8") == "<style>h1{}</style>"

    @pytest.mark.asyncio
    async def test_no_html(self, tmp_path, console):
        (tmp_path / "main.py").write_text("print(1)", encoding="utf-8")

        args = argparse.Namespace(directory=str(tmp_path), output=None, verbose=False)
        assert await run_preview(args, console) == 1


class TestMain:
    """Test the console script entry point"""

    def test_unexpected_error_is_rendered(self, monkeypatch, capsys):
        async def failing_command(args, console):
            raise RuntimeError("upstream exploded")

        monkeypatch.setitem(cli.main.COMMANDS, "parse", failing_command)
        monkeypatch.setattr("sys.argv", ["vibecoding", "parse", "transcript.txt"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "Error: upstream exploded" in capsys.readouterr().out

    def test_missing_transcript_exits_with_error(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("sys.argv", ["vibecoding", "parse", str(tmp_path / "missing.txt")])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "File not found" in capsys.readouterr().out
