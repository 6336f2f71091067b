"""Console output for the CLI.

Provides a Console class that wraps rich for consistent output.
All CLI output should go through this module.
"""

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from idverify.domain.identity.model.context import IdentityContext
from idverify.domain.identity.model.sample import TokenSample


class Console:
    """CLI output manager wrapping rich.

    Success output goes to stdout, errors to stderr.
    """

    def __init__(
        self,
        *,
        force_terminal: bool | None = None,
    ) -> None:
        """Initialize the console.

        Args:
            force_terminal: Force terminal mode (True/False) or auto-detect (None).
        """
        self._console = RichConsole(force_terminal=force_terminal, stderr=False)
        self._err_console = RichConsole(force_terminal=force_terminal, stderr=True)

    def success(self, message: str) -> None:
        """Print a success message."""
        self._console.print(f"[green]✓[/green] {message}")

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {message}")
        if hint:
            self._err_console.print(f"  [dim]{hint}[/dim]")

    def info(self, message: str) -> None:
        """Print a dimmed informational message."""
        self._console.print(f"[dim]{message}[/dim]")

    def identity_context(self, context: IdentityContext) -> None:
        """Print the resolved identities of a request."""
        lines = [
            f"[cyan]Caller:[/cyan] {context.caller_identity}",
            f"[cyan]User:[/cyan]   {context.user_identity or '[dim](none)[/dim]'}",
        ]
        self._console.print(Panel("\n".join(lines), title="[bold]Identity[/bold]", border_style="green"))

    def token_sample(self, sample: TokenSample) -> None:
        """Print a redacted token summary as a table."""
        table = Table(show_header=True, header_style="bold")
        table.add_column("Parts")
        table.add_column("Bearer prefix")
        table.add_column("Suffix")
        table.add_row(
            str(sample.part_count),
            "yes" if sample.has_bearer_prefix else "no",
            sample.suffix_sample or "[dim](empty)[/dim]",
        )
        self._console.print(table)


_default: Console | None = None


def get_console() -> Console:
    """Get the default console instance."""
    global _default
    if _default is None:
        _default = Console()
    return _default
