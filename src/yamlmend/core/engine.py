#!/usr/bin/env python3
"""
YAMLMEND ENGINE - The High Orchestrator
---------------------------------------
MendEngine runs the validate / format / auto-fix operations over files
on disk. It owns workspace resolution, recursion safety, backups and
atomic persistence; the text operations themselves stay pure.

Author: YamlMend Team
Date: 2026-10-19
"""

import logging
import os
import shutil
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from yamlmend.core.config import DEFAULT_OPTIONS, HealOptions
from yamlmend.core.models import Invalid
from yamlmend.healing.pipeline import HealingPipeline
from yamlmend.healing.reconstructor import healing_report
from yamlmend.validator.gate import ValidationGate

logger = logging.getLogger("yamlmend.engine")

MODES = ("check", "format", "fix")
BACKUP_SUFFIX = ".yamlmend.backup"
TEMP_SUFFIX = ".yamlmend.tmp"


class MendEngine:
    """
    Applies one operation per file and reports the outcome as a dict.
    Per-file failures are reported, never raised.
    """

    def __init__(self, workspace_path: str, options: HealOptions = DEFAULT_OPTIONS):
        self.workspace = Path(workspace_path).resolve()
        self.options = options
        self.pipeline = HealingPipeline(options)
        self.gate = ValidationGate(options)

    def run_operation(self, text: str, mode: str):
        """Dispatches a single text through the requested operation."""
        if mode == "check":
            return self.gate.check(text)
        if mode == "format":
            return self.gate.canonicalize(text)
        if mode == "fix":
            return self.pipeline.auto_fix(text)
        raise ValueError(f"Unknown mode '{mode}'. Expected one of: {', '.join(MODES)}")

    def process_file(self, relative_path: str, mode: str = "fix", write: bool = False,
                     force: bool = False) -> Dict[str, Any]:
        """
        Runs `mode` on one file. Writes only when the content changed and
        either the result is valid or `force` accepts best-effort text.
        """
        full_path = (self.workspace / relative_path).resolve()
        if not full_path.is_file():
            return self._file_error(relative_path, "FILE_NOT_FOUND", f"Path missing: {full_path}")

        try:
            raw_text = full_path.read_text(encoding='utf-8-sig')
            result = self.run_operation(raw_text, mode)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading {relative_path}: {e}")
            return self._file_error(relative_path, "ENGINE_ERROR", str(e))

        output = getattr(result, "text", raw_text)
        is_modified = mode != "check" and output != raw_text
        report = {
            "file_path": str(relative_path),
            "mode": mode,
            "success": result.ok,
            "status": self._derive_status(result.ok, is_modified, mode),
            "message": result.message if isinstance(result, Invalid) else "",
            "position": result.position if isinstance(result, Invalid) else None,
            "result": result,
            "original_content": raw_text,
            "healed_content": output if is_modified else None,
            "report": healing_report(raw_text, output, "OK" if result.ok else "INVALID"),
            "written": False,
            "backup_created": None,
            "timestamp": time.time(),
        }

        if write and is_modified and (result.ok or force):
            backup_path = self._create_unique_backup(full_path)
            try:
                shutil.copy2(full_path, backup_path)
                report["backup_created"] = str(backup_path.relative_to(self.workspace))
            except OSError as e:
                report["backup_warning"] = f"Backup failed: {e}"

            try:
                self._atomic_write(full_path, output)
                report["written"] = True
            except OSError as e:
                report["write_error"] = str(e)
                report["success"] = False

        return report

    def discover_files(self, extension: str = ".yaml", max_depth: int = 10) -> List[Path]:
        """
        Matching files under the workspace, sorted. The extension matches in
        lower or upper case. Symlinks are skipped to avoid loops; files deeper
        than `max_depth` are ignored.
        """
        patterns = {f"*{extension.lower()}", f"*{extension.upper()}"}
        found = set()
        for pattern in patterns:
            found.update(f for f in self.workspace.rglob(pattern) if f.is_file() and not f.is_symlink())
        return sorted(f for f in found if len(f.relative_to(self.workspace).parts) <= max_depth)

    def scan_directory(self, extension: str = ".yaml", mode: str = "fix", write: bool = False,
                       force: bool = False, max_depth: int = 10,
                       progress_callback: Optional[Callable[[int, int], None]] = None,
                       files: Optional[List[Path]] = None) -> List[Dict[str, Any]]:
        """
        Processes every discovered file, or the given `files` when the caller
        already ran discovery.
        """
        all_files = files if files is not None else self.discover_files(extension, max_depth)

        reports = []
        for processed, file_path in enumerate(all_files, 1):
            rel_path = str(file_path.relative_to(self.workspace))
            reports.append(self.process_file(rel_path, mode=mode, write=write, force=force))
            if progress_callback:
                progress_callback(processed, len(all_files))
        return reports

    def generate_summary(self, reports: List[Dict[str, Any]]) -> Dict[str, Any]:
        total = len(reports)
        successful = sum(1 for r in reports if r.get("success", False))
        return {
            "total_files": total,
            "success_rate": (successful / total) if total else 0,
            "successful": successful,
            "invalid": sum(1 for r in reports if r.get("status") == "INVALID"),
            "written_to_disk": sum(1 for r in reports if r.get("written", False)),
            "backups_created": sum(1 for r in reports if r.get("backup_created")),
            "system_errors": sum(1 for r in reports if r.get("status") in ("ENGINE_ERROR", "FILE_NOT_FOUND")),
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }

    def cleanup_backups(self, max_age_hours: float = 168) -> int:
        """Removes backups older than `max_age_hours` (default 7 days)."""
        count = 0
        cutoff = time.time() - (max_age_hours * 3600)
        for backup in self.workspace.rglob(f"*{BACKUP_SUFFIX}"):
            if backup.is_symlink():
                continue
            try:
                if backup.stat().st_mtime < cutoff:
                    backup.unlink()
                    count += 1
            except OSError:
                continue
        return count

    def _derive_status(self, ok: bool, modified: bool, mode: str) -> str:
        if not ok:
            return "INVALID"
        if mode == "check":
            return "VALID"
        return "CHANGED" if modified else "UNCHANGED"

    def _atomic_write(self, target_path: Path, content: str):
        if not os.access(target_path.parent, os.W_OK):
            raise PermissionError(f"No write access to {target_path.parent}")
        temp_file = target_path.with_name(target_path.name + TEMP_SUFFIX)
        try:
            temp_file.write_text(content, encoding='utf-8')
            os.replace(temp_file, target_path)
        except OSError:
            if temp_file.exists():
                temp_file.unlink()
            raise

    def _create_unique_backup(self, target_path: Path) -> Path:
        backup_path = target_path.with_name(target_path.name + BACKUP_SUFFIX)
        counter = 1
        while backup_path.exists():
            backup_path = target_path.with_name(f"{target_path.name}-{counter}{BACKUP_SUFFIX}")
            counter += 1
        return backup_path

    def _file_error(self, path: str, status: str, error: str) -> Dict[str, Any]:
        return {
            "file_path": path, "status": status, "error": error,
            "success": False, "written": False, "healed_content": None,
        }
