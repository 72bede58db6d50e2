#!/usr/bin/env python3
"""
YAMLMEND CLI - Terminal Editor Surface
--------------------------------------
Translates user commands into the three operations:

    check   strict validation, input never modified
    format  strict parse + canonical output, no repair
    fix     heuristic auto-fix followed by the strict gate
    clean   remove backups older than a given age

A path may be a file, a directory (processed recursively) or "-" for
stdin. Output is shown with syntax highlighting together with the last
diagnostic and a success / failure notification.

Author: YamlMend Team
Date: 2026-10-19
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from yamlmend.cli.formatter import ReportFormatter, console
from yamlmend.core.config import HealOptions
from yamlmend.core.engine import MendEngine

VERSION = "yamlmend v1.0.0"

NOTIFICATIONS = {
    "check": (("Valid YAML", "No syntax errors found"), "Invalid YAML"),
    "format": (("Success", "YAML formatted successfully"), "Error"),
    "fix": (("Auto-fixed", "Fixed tabs, indentation, and syntax errors"), "Cannot auto-fix"),
}


class YamlMendCLI:
    """
    CLI wrapper that translates user commands into Engine actions.
    Provides visual feedback, safety confirmations and diffs.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="yamlmend",
            description="YamlMend - YAML validator, formatter & auto-fixer",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = ReportFormatter()
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-v", "--version", action="version", version=VERSION)
        self.parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        check_parser = subparsers.add_parser("check", help="🔍 Validate YAML (read-only)")
        self._add_common(check_parser)

        format_parser = subparsers.add_parser("format", help="✨ Canonically format valid YAML")
        self._add_common(format_parser)
        self._add_write_flags(format_parser)

        fix_parser = subparsers.add_parser("fix", help="❤️ Auto-fix malformed YAML")
        self._add_common(fix_parser)
        self._add_write_flags(fix_parser)
        fix_parser.add_argument("--force", action="store_true",
                                help="Write best-effort text even when the fix is still invalid")
        fix_parser.add_argument("--reset-on-blank", action="store_true",
                                help="End a list run at a blank line")

        clean_parser = subparsers.add_parser("clean", help="🧹 Remove old .yamlmend.backup files")
        clean_parser.add_argument("path", help="Directory to clean recursively")
        clean_parser.add_argument("--max-age", type=float, default=168, metavar="HOURS",
                                  help="Only remove backups older than HOURS (default: 168)")

    def _add_common(self, parser: argparse.ArgumentParser):
        parser.add_argument("path", help="Path to a YAML file or directory, or '-' for stdin")
        parser.add_argument("--ext", default=".yaml", help="File extension filter (default: .yaml)")
        parser.add_argument("--raw", action="store_true", help="Print output text only (for piping)")

    def _add_write_flags(self, parser: argparse.ArgumentParser):
        parser.add_argument("-w", "--write", action="store_true", help="Write results back to disk")
        parser.add_argument("--diff", action="store_true", help="Show a diff of proposed changes")
        parser.add_argument("-y", "--yes", action="store_true", help="Skip the confirmation prompt")

    def _options(self, args: argparse.Namespace) -> HealOptions:
        return HealOptions(reset_list_on_blank=getattr(args, "reset_on_blank", False))

    def _confirm_action(self, target_count: int, args: argparse.Namespace) -> bool:
        """Safety Gate: ensures the user wants to proceed with writes."""
        if not getattr(args, "write", False) or args.yes:
            return True
        if target_count == 1:
            choice = console.input("\n[bold yellow]Apply changes to this file? (y/N): [/bold yellow]").lower()
            return choice == 'y'
        user_input = console.input(
            f"[bold yellow]Type 'CONFIRM' to modify {target_count} files: [/bold yellow]"
        )
        return user_input == "CONFIRM"

    def _run_stdin(self, args: argparse.Namespace) -> int:
        engine = MendEngine(".", self._options(args))
        text = sys.stdin.read()
        result = engine.run_operation(text, args.command)
        return self._render_single(args, "<stdin>", text, result)

    def _render_single(self, args: argparse.Namespace, name: str, text: str, result) -> int:
        output = getattr(result, "text", text)
        if args.raw:
            if args.command != "check":
                sys.stdout.write(output)
            if not result.ok:
                print(result.message, file=sys.stderr)
            return 0 if result.ok else 1

        success, failure_title = NOTIFICATIONS[args.command]
        if args.command != "check":
            if getattr(args, "diff", False):
                self.formatter.display_diff(text, output, name)
            self.formatter.show_output(output, "Output" if result.ok else "Best-effort output")
        self.formatter.show_diagnostic(result)
        if result.ok:
            self.formatter.notify(*success)
        else:
            self.formatter.notify(failure_title, result.message, success=False)
        return 0 if result.ok else 1

    def _run_file(self, args: argparse.Namespace, input_path: Path) -> int:
        engine = MendEngine(str(input_path.parent), self._options(args))
        if not self._confirm_action(1, args):
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            return 1

        report = engine.process_file(
            input_path.name, mode=args.command,
            write=getattr(args, "write", False), force=getattr(args, "force", False),
        )
        if report["status"] in ("ENGINE_ERROR", "FILE_NOT_FOUND"):
            self.formatter.notify("Error", report["error"], success=False)
            return 1

        code = self._render_single(args, input_path.name, report["original_content"], report["result"])
        if report["written"]:
            console.print(f"[green]Wrote {input_path}[/green] (backup: {report['backup_created']})")
        elif report.get("write_error"):
            console.print(f"[bold red]Write failed:[/bold red] {report['write_error']}")
            code = 1
        return code

    def _run_directory(self, args: argparse.Namespace, input_path: Path) -> int:
        engine = MendEngine(str(input_path), self._options(args))
        targets = engine.discover_files(args.ext)
        if not targets:
            console.print("\n[bold yellow]⚠️  No matching YAML files found.[/bold yellow]")
            return 0
        if not self._confirm_action(len(targets), args):
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            return 1

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console
        ) as progress:
            task_id = progress.add_task("Processing files...", total=len(targets))
            reports = engine.scan_directory(
                extension=args.ext, mode=args.command,
                write=getattr(args, "write", False), force=getattr(args, "force", False),
                progress_callback=lambda done, total: progress.update(task_id, completed=done),
                files=targets,
            )

        if getattr(args, "diff", False):
            for r in reports:
                if r.get("healed_content") is not None:
                    self.formatter.display_diff(r["original_content"], r["healed_content"], r["file_path"])

        self.formatter.print_final_table(reports, engine.generate_summary(reports))
        return 0 if all(r.get("success") for r in reports) else 1

    def _run_clean(self, args: argparse.Namespace, input_path: Path) -> int:
        workspace = input_path if input_path.is_dir() else input_path.parent
        removed = MendEngine(str(workspace)).cleanup_backups(max_age_hours=args.max_age)
        console.print(f"[green]Removed {removed} backup(s)[/green] older than {args.max_age:g}h in {workspace}")
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point."""
        args = self.parser.parse_args(argv)
        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

        if args.command is None:
            self.parser.print_help()
            return 2
        if args.path == "-" and args.command != "clean":
            return self._run_stdin(args)

        input_path = Path(args.path).resolve()
        if not input_path.exists():
            console.print(f"[bold red]Error:[/bold red] Path '{args.path}' not found.")
            return 2
        if args.command == "clean":
            return self._run_clean(args, input_path)
        if input_path.is_dir():
            return self._run_directory(args, input_path)
        return self._run_file(args, input_path)


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(YamlMendCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
