#!/usr/bin/env python3
"""
VibeCoding CLI - Main Entry Point

Usage:
    vibecoding parse transcript.txt              # Parse a saved model output
    vibecoding parse transcript.txt -o out/      # ...and write the files
    vibecoding preview out/ -o preview.html      # Inline a project into one HTML page
    vibecoding generate "a todo app" -o out/     # Live streaming generation

Environment:
    DEEPSEEK_API_KEY, DEEPSEEK_API_URL, DEEPSEEK_MODEL are read from the
    environment or a .env file in the working directory.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import aiofiles
from dotenv import load_dotenv
from rich.console import Console


DEFAULT_CHUNK_SIZE = 64

# Directories never loaded into a virtual file set
SKIP_DIRS = {".git", "node_modules", "__pycache__", ".venv", "venv"}


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog="vibecoding",
        description="VibeCoding - streamed multi-file code generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vibecoding parse transcript.txt                 Show the files in a saved model output
  vibecoding parse transcript.txt -o out/         Write them under out/
  vibecoding preview out/ -o preview.html         Build a self-contained preview page
  vibecoding generate "a snake game" -o snake/    Generate a project with DeepSeek
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show file contents and full tracebacks"
    )

    subparsers = parser.add_subparsers(dest="command")

    parse_parser = subparsers.add_parser("parse", help="Parse a saved FILE/LANGUAGE/CONTENT/ENDFILE transcript")
    parse_parser.add_argument("transcript", help="Raw model output file")
    parse_parser.add_argument("-o", "--output", help="Directory to write the parsed files to")
    parse_parser.add_argument(
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Characters per simulated stream fragment (default: {DEFAULT_CHUNK_SIZE})"
    )

    preview_parser = subparsers.add_parser("preview", help="Assemble a project directory into one HTML page")
    preview_parser.add_argument("directory", help="Project directory")
    preview_parser.add_argument("-o", "--output", help="Output HTML file (default: stdout)")

    generate_parser = subparsers.add_parser("generate", help="Generate a project with streaming output")
    generate_parser.add_argument("request", help="What to build")
    generate_parser.add_argument("-o", "--output", help="Directory to write the generated files to")

    return parser


def chunk_text(text: str, size: int) -> List[str]:
    """Split text into fixed-size fragments"""
    size = max(1, size)
    return [text[i:i + size] for i in range(0, len(text), size)]


def resolve_output_path(output_dir: Path, file_path: str) -> Optional[Path]:
    """Target path for a generated file, None when it would escape output_dir"""
    root = output_dir.resolve()
    target = (root / file_path.lstrip("/")).resolve()
    if target != root and root not in target.parents:
        return None
    return target


async def write_file(output_dir: Path, file_path: str, content: str) -> Optional[Path]:
    target = resolve_output_path(output_dir, file_path)
    if target is None:
        return None
    target.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(target, "w", encoding="utf-8") as f:
        await f.write(content)
    return target


async def load_project(directory: Path) -> list:
    """Read a directory into a virtual file set ('/'-separated relative paths)"""
    from vibecoding.utils.file_extensions import detect_language_from_path
    from vibecoding.utils.stream_parser import CodeFile

    files = []
    for path in sorted(directory.rglob("*")):
        if not path.is_file() or SKIP_DIRS.intersection(path.relative_to(directory).parts):
            continue
        relative = path.relative_to(directory).as_posix()
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
        except UnicodeDecodeError:
            # Binary assets cannot be inlined
            continue
        files.append(CodeFile(path=relative, content=content, language=detect_language_from_path(relative)))
    return files


async def run_parse(args, console: Console) -> int:
    from cli.renderer import ResponseRenderer
    from vibecoding.utils.stream_parser import FileCompleteEvent, StreamingFileBlockParser

    renderer = ResponseRenderer(console)
    async with aiofiles.open(args.transcript, "r", encoding="utf-8") as f:
        text = await f.read()

    parser = StreamingFileBlockParser()
    files = [
        event.file
        for event in parser.iter_events(chunk_text(text, args.chunk_size))
        if isinstance(event, FileCompleteEvent)
    ]

    renderer.render_files(files, title=f"📁 {Path(args.transcript).name}")
    renderer.render_issues(parser.issues)
    if args.verbose:
        for file in files:
            renderer.render_file(file)

    if args.output:
        output_dir = Path(args.output)
        for file in files:
            written = await write_file(output_dir, file.path, file.content)
            if written is None:
                console.print(f"[yellow]Skipped {file.path}: outside {output_dir}[/yellow]")
            else:
                console.print(f"[green]✓[/green] wrote {written}")

    return 0


async def run_preview(args, console: Console) -> int:
    from vibecoding.utils.html_inliner import build_preview

    directory = Path(args.directory)
    if not directory.is_dir():
        console.print(f"[red]✗ Not a directory:[/red] {directory}")
        return 1

    document = build_preview(await load_project(directory))
    if document is None:
        console.print(f"[red]✗ No HTML entry file found in {directory}[/red]")
        return 1

    if args.output:
        async with aiofiles.open(args.output, "w", encoding="utf-8") as f:
            await f.write(document.html)
        console.print(f"[green]✓[/green] Preview of [bold]{document.entry_path}[/bold] written to {args.output}")
    else:
        sys.stdout.write(document.html)

    err_console = Console(stderr=True)
    if document.inlined:
        err_console.print(f"[dim]Inlined: {', '.join(document.inlined)}[/dim]")
    if document.unresolved:
        err_console.print(f"[yellow]Unresolved: {', '.join(document.unresolved)}[/yellow]")
    return 0


async def run_generate(args, console: Console) -> int:
    from cli.renderer import ResponseRenderer
    from vibecoding.services.code_generator import code_generator
    from vibecoding.utils.stream_parser import DoneEvent, FileCompleteEvent, ProgressEvent

    renderer = ResponseRenderer(console)
    output_dir = Path(args.output) if args.output else None

    async for event in code_generator.generate_stream(args.request):
        if isinstance(event, ProgressEvent):
            renderer.render_progress(event.path)
        elif isinstance(event, FileCompleteEvent):
            written = None
            if output_dir is not None:
                written = await write_file(output_dir, event.file.path, event.file.content)
            renderer.render_file_complete(event.file, str(written) if written else None)
            if args.verbose:
                renderer.render_file(event.file)
        elif isinstance(event, DoneEvent):
            renderer.render_done(event.file_count)

    return 0


COMMANDS = {
    "parse": run_parse,
    "preview": run_preview,
    "generate": run_generate,
}


def main():
    """Main entry point"""
    load_dotenv()

    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    from cli.renderer import ResponseRenderer
    from vibecoding.core.exceptions import VibeCodingError

    console = Console()
    renderer = ResponseRenderer(console)

    try:
        exit_code = asyncio.run(COMMANDS[args.command](args, console))
    except KeyboardInterrupt:
        console.print("\n\nCancelled")
        exit_code = 130
    except FileNotFoundError as e:
        console.print(f"\n[red]✗ File not found:[/red] {e.filename}")
        exit_code = 1
    except VibeCodingError as e:
        console.print(f"\n[red]✗ {e.code}:[/red] {e.message}")
        exit_code = 1
    except Exception as e:
        if args.verbose:
            console.print_exception()
        else:
            renderer.render_error(str(e))
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
