# src/yamlmend/cli/formatter.py
import difflib
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from yamlmend.core.models import Invalid

# Initialize the Rich console for high-quality terminal output
console = Console()


class ReportFormatter:
    """
    ReportFormatter: the visual heart of the CLI.
    Renders output YAML, diffs, diagnostics and the run summary.
    """

    def __init__(self, out: Optional[Console] = None):
        self.console = out or console

    def show_output(self, text: str, title: str):
        if not text.strip():
            self.console.print(f"[dim]{title}: (empty document)[/dim]")
            return
        syntax = Syntax(text.rstrip("\n"), "yaml", theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=title, border_style="cyan"))

    def display_diff(self, original_text: str, healed_text: str, file_name: str):
        """
        Calculates and renders a colorized diff between the original
        input and the mended output.
        """
        diff_list = list(difflib.unified_diff(
            original_text.splitlines(),
            healed_text.splitlines(),
            fromfile=f"original/{file_name}",
            tofile=f"mended/{file_name}",
            lineterm=""
        ))

        if not diff_list:
            self.console.print(f"[dim]No changes needed for {file_name}.[/dim]")
            return

        syntax = Syntax("\n".join(diff_list), "diff", theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=f"Proposed Changes: {file_name}", border_style="green"))

    def notify(self, title: str, description: str, success: bool = True):
        """Transient success / failure notification."""
        style = "green" if success else "red"
        icon = "✅" if success else "❌"
        self.console.print(Panel.fit(
            f"{icon} [bold]{description}[/bold]",
            title=f"[bold {style}]{title}[/bold {style}]",
            border_style=style,
        ))

    def show_diagnostic(self, result: Any):
        """Displays the last diagnostic; silent for successful results."""
        if isinstance(result, Invalid):
            self.console.print(Panel(result.message, title="[bold red]Error[/bold red]", border_style="red"))

    def print_final_table(self, reports: List[Dict[str, Any]], summary: Dict[str, Any]):
        """
        Builds the summary table shown at the end of a directory run.
        """
        table = Table(title="YamlMend Execution Report", show_lines=True, header_style="bold magenta")
        table.add_column("File Path", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Detail")
        table.add_column("Result", justify="center")

        for r in reports:
            success = r.get("success", False)
            color = "green" if success else "red"
            table.add_row(
                str(r.get("file_path")),
                f"[{color}]{r.get('status', 'FAILED')}[/{color}]",
                r.get("message") or r.get("error") or r.get("write_error") or "",
                "✅" if success else "❌",
            )

        self.console.print(table)
        self.console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Total Files:     {summary['total_files']}\n"
            f"Success:         [green]{summary['successful']}[/green]\n"
            f"Invalid:         [red]{summary['invalid']}[/red]\n"
            f"System Errors:   [red]{summary['system_errors']}[/red]\n"
            f"Written:         {summary['written_to_disk']}\n"
            f"Backups Created: {summary['backups_created']}",
            border_style="dim"
        ))
