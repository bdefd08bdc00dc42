"""
Terminal rendering for the vibecoding CLI

Tables for parsed files and parse diagnostics, a one-line status per
streamed generation event, and syntax-highlighted file panels.
"""

from typing import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from vibecoding.utils.stream_parser import CodeFile, ParseIssue, ParseIssueKind


ISSUE_STYLES = {
    ParseIssueKind.MALFORMED_MARKER: "yellow",
    ParseIssueKind.UNTERMINATED_FILE: "yellow",
    ParseIssueKind.OVERSIZED_CONTENT: "red",
}


class ResponseRenderer:
    """Renders parser and generator output in the terminal"""

    def __init__(self, console: Console, syntax_theme: str = "monokai"):
        self.console = console
        self.syntax_theme = syntax_theme

    def render_files(self, files: Sequence[CodeFile], title: str = "📁 Files"):
        """Table of files with language and size"""
        if not files:
            self.console.print("[dim]No files found[/dim]")
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("#", style="dim", width=4)
        table.add_column("Path", style="white")
        table.add_column("Language", style="green")
        table.add_column("Lines", justify="right")
        table.add_column("Chars", justify="right")

        for i, file in enumerate(files, 1):
            table.add_row(
                str(i),
                file.path,
                file.language or "-",
                str(len(file.content.splitlines())),
                str(len(file.content)),
            )

        self.console.print(table)

    def render_issues(self, issues: Sequence[ParseIssue]):
        if not issues:
            return

        table = Table(title="⚠ Parse diagnostics", show_header=True, header_style="bold yellow")
        table.add_column("Kind")
        table.add_column("File", style="dim")
        table.add_column("Message")

        for issue in issues:
            style = ISSUE_STYLES.get(issue.kind, "white")
            table.add_row(f"[{style}]{issue.kind.value}[/{style}]", issue.path or "-", issue.message)

        self.console.print(table)

    def render_file(self, file: CodeFile, show_line_numbers: bool = True):
        """Syntax-highlighted panel for one file"""
        syntax = Syntax(
            file.content,
            file.language or "text",
            theme=self.syntax_theme,
            line_numbers=show_line_numbers,
            word_wrap=True
        )
        self.console.print(Panel(
            syntax,
            title=f"[bold]{file.path}[/bold]",
            border_style="green",
            padding=(0, 1)
        ))

    def render_progress(self, path: str):
        self.console.print(f"[yellow]⟳[/yellow] generating [bold]{path}[/bold]")

    def render_file_complete(self, file: CodeFile, written_to: str = None):
        suffix = f" [dim]→ {written_to}[/dim]" if written_to else ""
        self.console.print(f"[green]✓[/green] {file.path} [dim]({len(file.content)} chars)[/dim]{suffix}")

    def render_done(self, file_count: int):
        self.console.print(f"\n[bold green]Done:[/bold green] {file_count} file(s) generated")

    def render_error(self, message: str):
        self.console.print(f"\n[red]✗ Error:[/red] {message}")
