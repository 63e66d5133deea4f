"""Console reporter: CheckResult → rich formatted tables."""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from typing import TYPE_CHECKING, TextIO

from rich.console import Console
from rich.table import Table

from jarcheck.application.reporters._base import BaseReporter

if TYPE_CHECKING:
    from jarcheck.domain.model.check_result import CheckResult


@dataclass(frozen=True, slots=True)
class ConsoleConfig:
    """Configuration for console reporter.

    All fields have defaults (convenience). Immutable (frozen dataclass).

    Attributes:
        show_dependencies: Show the dependency table.
        show_references: Show which explored class references which.
        max_rows: Max dependency rows. None = unlimited.
        color: Emit ANSI styles.
        width: Console width in columns.
    """

    show_dependencies: bool = True
    show_references: bool = False
    max_rows: int | None = None
    color: bool = True
    width: int = 120

    def __post_init__(self) -> None:
        """Validate invariants. FAIL-FIRST."""
        if self.max_rows is not None and self.max_rows < 0:
            raise ValueError(f"max_rows must be >= 0, got {self.max_rows}")
        if self.width < 40:
            raise ValueError(f"width must be >= 40, got {self.width}")


class ConsoleReporter(BaseReporter):
    """Console reporter: outputs rich formatted text.

    render() returns str; report() writes it to the output stream.
    """

    def __init__(self, output: TextIO | None = None, config: ConsoleConfig | None = None) -> None:
        """Initialize reporter.

        Args:
            output: Output stream (default: sys.stdout)
            config: Reporter configuration. Uses defaults if None.
        """
        super().__init__(output)
        self._config = config or ConsoleConfig()

    def render(self, result: CheckResult) -> str:
        """Format check result as rich formatted string.

        Args:
            result: Check result to format.

        Returns:
            Formatted string with tables.
        """
        buffer = StringIO()
        console = Console(
            file=buffer,
            force_terminal=self._config.color,
            no_color=not self._config.color,
            highlight=False,
            width=self._config.width,
        )

        self._render_header(console, result)

        if result.failures:
            self._render_failures(console, result)

        if self._config.show_dependencies and result.dependencies:
            self._render_dependencies(console, result)

        if self._config.show_references and result.references:
            self._render_references(console, result)

        self._render_verdict(console, result)
        return buffer.getvalue()

    def _render_header(self, console: Console, result: CheckResult) -> None:
        """Render header with summary."""
        console.print()
        console.rule("[bold]CLASSPATH CHECK[/bold]")
        console.print()
        console.print(f"[bold]Entry:[/bold] {result.entry}")
        for archive in result.archives:
            console.print(f"[bold]Archive:[/bold] {archive}")
        console.print(
            f"[bold]Visited:[/bold] {result.visited_count}  "
            f"[bold]Dependencies:[/bold] {result.dependency_count}  "
            f"[bold]Failures:[/bold] {len(result.failures)}  "
            f"[dim]({result.elapsed:.3f}s)[/dim]"
        )
        console.print()

    def _render_failures(self, console: Console, result: CheckResult) -> None:
        """Render unresolved classes."""
        table = Table(title="Unresolved classes", title_justify="left")
        table.add_column("Class", style="red", overflow="fold")
        table.add_column("Kind")
        table.add_column("Reason", overflow="fold")

        for failure in result.failures:
            table.add_row(failure.type_name, failure.kind.name, failure.reason)

        console.print(table)
        console.print()

    def _render_dependencies(self, console: Console, result: CheckResult) -> None:
        """Render dependency listing with resolution status."""
        failed = {f.type_name for f in result.failures}
        names = sorted(result.dependencies)
        shown = names if self._config.max_rows is None else names[: self._config.max_rows]

        table = Table(title="Dependencies", title_justify="left")
        table.add_column("Class", overflow="fold")
        table.add_column("Status")

        for name in shown:
            if name in failed:
                status = "[red]unresolved[/red]"
            elif name in result.references:
                status = "[green]found[/green]"
            else:
                status = "[yellow]not explored[/yellow]"
            table.add_row(name, status)

        console.print(table)
        if len(shown) < len(names):
            console.print(f"[dim]... {len(names) - len(shown)} more[/dim]")
        console.print()

    def _render_references(self, console: Console, result: CheckResult) -> None:
        """Render direct references of each explored class."""
        console.print("[bold]REFERENCES[/bold]")
        console.print()

        for owner, refs in sorted(result.references.items()):
            console.print(f"[cyan]{owner}[/cyan]")
            for ref in sorted(refs):
                console.print(f"  → {ref}")

        console.print()

    def _render_verdict(self, console: Console, result: CheckResult) -> None:
        """Render final verdict line."""
        if result.resolved:
            console.rule("[bold green]RESOLVED[/bold green]")
        else:
            console.rule("[bold red]UNRESOLVED[/bold red]")
