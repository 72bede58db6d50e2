#!/usr/bin/env python3
"""
YAMLMEND EXPORTER - High-Fidelity Round-Trip
--------------------------------------------
Converts parsed documents back into canonical YAML text.

Canonical means: 2-space mappings, sequences indented two columns under
their key, root-level sequences flush at column 0, no forced line
wrapping, key order and quoting preserved.

Collection style is preserved as well: a flow collection such as
`a: [1, 2]` stays in flow style and is not rewritten as a block
sequence. Only block layout is canonicalized.

Author: YamlMend Team
Date: 2026-10-19
"""

import io
import sys
from typing import Any, List

from ruamel.yaml import YAML

from yamlmend.core.config import DEFAULT_OPTIONS, HealOptions

DOCUMENT_END = "\n...\n"
DOCUMENT_START = "---\n"


class CanonicalExporter:
    """
    The Reconstructor's counterpart: turns round-trip documents into text.
    """

    def __init__(self, options: HealOptions = DEFAULT_OPTIONS):
        self.options = options

    def _make_yaml(self) -> YAML:
        # A fresh emitter per export keeps concurrent callers independent.
        yaml = YAML(typ='rt')
        yaml.preserve_quotes = self.options.preserve_quotes
        step = self.options.indent
        yaml.indent(mapping=step, sequence=step * 2, offset=step)
        yaml.width = self.options.line_width or sys.maxsize
        return yaml

    def _dedent_root_sequence(self, text: str) -> str:
        """
        The dash offset that places nested sequences under their key also
        shifts a root block sequence; pull every line of it back by one step.
        """
        prefix = ' ' * self.options.indent
        lines = text.splitlines(keepends=True)
        first_item = next((line for line in lines if line.strip() and not line.lstrip().startswith('#')), "")
        if not first_item.startswith(prefix + '-'):
            return text
        return ''.join(line[len(prefix):] if line.startswith(prefix) else line for line in lines)

    def _export_document(self, yaml: YAML, document: Any) -> str:
        stream = io.StringIO()
        yaml.dump(document, stream)
        text = stream.getvalue()

        # A bare root scalar gets an explicit "..." end marker; drop it.
        if text.endswith(DOCUMENT_END):
            text = text[:-len(DOCUMENT_END) + 1]
        if isinstance(document, list):
            text = self._dedent_root_sequence(text)
        return text

    def export(self, documents: List[Any]) -> str:
        """
        Exports every document of a stream. An empty stream exports as "".
        Documents after the first are introduced by a "---" marker.
        """
        if not documents:
            return ""

        yaml = self._make_yaml()
        parts = [self._export_document(yaml, document) for document in documents]
        return DOCUMENT_START.join(parts)
