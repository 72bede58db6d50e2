#!/usr/bin/env python3
"""
YAMLMEND CORE MODELS
--------------------
Defines the fundamental data structures used across the YamlMend engine:
classified source lines, the reconstruction accumulator and the tagged
results returned by every public operation.

Author: YamlMend Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple, Union


class LineRole(str, Enum):
    """Structural role of a single normalized line."""
    BLANK = "blank"
    MAPPING_KEY = "mapping-key"
    LIST_ITEM = "list-item"
    OTHER = "other"


@dataclass(frozen=True)
class SourceLine:
    """
    The atomic unit of a document undergoing repair.

    A SourceLine is produced by the Classifier for every line of the
    normalized text, blank lines included, so line numbers never drift.
    """
    index: int              # 0-based position in the normalized text
    raw: str                # The normalized, unmutated line
    indent: int             # Count of leading space characters
    content: str            # The line with surrounding whitespace removed
    role: LineRole


@dataclass(frozen=True)
class ReconstructState:
    """
    Accumulator threaded through the reconstruction fold.

    mapping_stack holds the indents of currently open block mappings,
    strictly increasing from the outermost (index 0) to the innermost.
    """
    mapping_stack: Tuple[int, ...] = ()
    run_indent: Optional[int] = None
    run_start: int = -1
    key_opened: bool = False  # previous non-blank line was a mapping key

    @property
    def in_run(self) -> bool:
        return self.run_indent is not None


@dataclass(frozen=True)
class ErrorPosition:
    """1-based location of the first structural error."""
    line: int
    column: int


@dataclass(frozen=True)
class Valid:
    ok = True


@dataclass(frozen=True)
class Formatted:
    text: str
    ok = True


@dataclass(frozen=True)
class Invalid:
    """
    Failure result. `text` is the best text available at the failing
    boundary: the untouched input for validate/format, the reconstructed
    text for auto-fix.
    """
    text: str
    message: str
    position: Optional[ErrorPosition] = None
    ok = False


FixResult = Union[Formatted, Invalid]
ValidateResult = Union[Valid, Invalid]


@dataclass
class ParsedYAML:
    """Documents produced by a strict parse of one YAML stream."""
    documents: List[Any] = field(default_factory=list)

    @property
    def value(self) -> Any:
        # An empty stream has no value; multi-document streams expose the first.
        return self.documents[0] if self.documents else None


@dataclass
class LineChange:
    line: int
    original: str
    fixed: str
    indent_original: int
    indent_fixed: int


@dataclass
class HealReport:
    """Per-line summary of what a healing pass changed."""
    status: str
    total_lines: int
    changes: List[LineChange] = field(default_factory=list)

    @property
    def lines_changed(self) -> int:
        return len(self.changes)
