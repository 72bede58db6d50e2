#!/usr/bin/env python3
"""
YAMLMEND CONFIGURATION
----------------------
Tunables shared by the healing pipeline, the exporter and the engine.
The CLI builds one HealOptions from its flags and threads it through.

Author: YamlMend Team
Date: 2026-10-19
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class HealOptions:
    """
    Options for a single healing session.

    Attributes:
        indent: Columns per nesting level, used both for list-item
            placement under a key and by the canonical serializer.
        reset_list_on_blank: When True, a blank line ends the active list
            run. By default the run survives blank lines.
        line_width: Serializer wrap width. None disables wrapping.
        preserve_quotes: Keep the quoting style of scalars on output.
    """
    indent: int = 2
    reset_list_on_blank: bool = False
    line_width: Optional[int] = None
    preserve_quotes: bool = True


DEFAULT_OPTIONS = HealOptions()
