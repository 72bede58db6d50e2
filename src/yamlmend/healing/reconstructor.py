#!/usr/bin/env python3
"""
YAMLMEND RECONSTRUCTOR - Phase 1.3 (The Architect)
--------------------------------------------------
Reassigns indentation to list items relative to the nearest open block
mapping. Keys and scalars are trusted anchors and keep their observed
indent; only list-item depth is corrected.

The pass is a fold over classified lines with an explicit accumulator
(ReconstructState), so each transition can be exercised on its own via
`step`. It never fails; its output may still be invalid YAML, which the
Validation Gate detects.

Author: YamlMend Team
Date: 2026-10-19
"""

import logging
from dataclasses import replace
from typing import Iterable, List, Tuple

from yamlmend.core.models import (
    HealReport,
    LineChange,
    LineRole,
    ReconstructState,
    SourceLine,
)

logger = logging.getLogger("yamlmend.reconstructor")


class IndentReconstructor:
    """
    Stack-driven list realignment.

    A block sequence under a mapping key sits `indent` columns deeper than
    the key; all siblings of one contiguous run share a single depth.
    """

    def __init__(self, indent: int = 2, reset_list_on_blank: bool = False):
        self.indent = indent
        self.reset_list_on_blank = reset_list_on_blank

    def _close_mappings(self, stack: Tuple[int, ...], indent: int) -> Tuple[int, ...]:
        """Drops every open mapping that no longer encloses a line at `indent`."""
        depth = len(stack)
        while depth and indent <= stack[depth - 1]:
            depth -= 1
        return stack[:depth]

    def _place(self, indent: int, content: str) -> str:
        return ' ' * indent + content

    def step(self, state: ReconstructState, line: SourceLine) -> Tuple[ReconstructState, str]:
        """
        Applies one line to the accumulator.
        Returns the next state and the line to emit.
        """
        if line.role is LineRole.BLANK:
            if self.reset_list_on_blank and state.in_run:
                state = replace(state, run_indent=None, run_start=-1)
            return state, line.raw

        # A dash right after "key:" belongs to that key, whatever its depth.
        attaches = line.role is LineRole.LIST_ITEM and state.key_opened and bool(state.mapping_stack)
        stack = state.mapping_stack if attaches else self._close_mappings(state.mapping_stack, line.indent)

        if line.role is LineRole.MAPPING_KEY:
            next_state = ReconstructState(mapping_stack=stack + (line.indent,), key_opened=True)
            return next_state, self._place(line.indent, line.content)

        if line.role is LineRole.LIST_ITEM:
            if attaches:
                target = stack[-1] + self.indent
                run_start = line.index
            elif state.in_run:
                target = state.run_indent
                run_start = state.run_start
            elif stack:
                target = stack[-1] + self.indent
                run_start = line.index
            else:
                target, run_start = 0, line.index

            next_state = ReconstructState(
                mapping_stack=stack, run_indent=target, run_start=run_start, key_opened=False
            )
            return next_state, self._place(target, line.content)

        # Scalars, continuations, flow fragments, comments.
        return ReconstructState(mapping_stack=stack), self._place(line.indent, line.content)

    def fold(self, lines: Iterable[SourceLine]) -> Tuple[ReconstructState, List[str]]:
        state = ReconstructState()
        emitted = []
        for line in lines:
            state, out = self.step(state, line)
            emitted.append(out)
        return state, emitted

    def reconstruct(self, lines: Iterable[SourceLine]) -> str:
        """Runs the full pass and rejoins the emitted lines."""
        _, emitted = self.fold(lines)
        logger.debug("Reconstructed %d lines", len(emitted))
        return '\n'.join(emitted)


def healing_report(original: str, final: str, status: str) -> HealReport:
    """Line-by-line summary of the changes a heal made."""
    original_lines = original.splitlines()
    final_lines = final.splitlines()
    report = HealReport(status=status, total_lines=len(original_lines))

    # Only compare up to the shortest text to avoid zip issues
    for i, (orig, fixed) in enumerate(zip(original_lines, final_lines)):
        if orig != fixed:
            report.changes.append(LineChange(
                line=i + 1,
                original=orig,
                fixed=fixed,
                indent_original=len(orig) - len(orig.lstrip()),
                indent_fixed=len(fixed) - len(fixed.lstrip()),
            ))
    return report
