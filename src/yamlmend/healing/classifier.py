#!/usr/bin/env python3
"""
YAMLMEND CLASSIFIER - Line Sharder (Phase 1.2)
----------------------------------------------
Decomposes normalized text into SourceLine records tagged with their
indent depth and structural role.

This is syntactic only. Lines inside multi-line scalars or flow
collections spanning several lines can be misclassified; such inputs
are expected to fail at the Validation Gate rather than be silently
corrupted.

Author: YamlMend Team
Date: 2026-10-19
"""

import re
from typing import List

from yamlmend.core.models import LineRole, SourceLine

LIST_MARKER = re.compile(r'^-\s+')


class LineClassifier:
    """Tags every line of a normalized document with a LineRole."""

    def classify_line(self, index: int, line: str) -> SourceLine:
        content = line.strip()
        indent = len(line) - len(line.lstrip(' '))

        if not content:
            role = LineRole.BLANK
        elif content.endswith(':'):
            # "- name:" opens a mapping too, so keys win over list markers.
            role = LineRole.MAPPING_KEY
        elif LIST_MARKER.match(content):
            role = LineRole.LIST_ITEM
        else:
            role = LineRole.OTHER

        return SourceLine(index=index, raw=line, indent=indent, content=content, role=role)

    def classify(self, text: str) -> List[SourceLine]:
        """
        Splits on "\\n" only (the Normalizer has already unified line
        endings) so a trailing newline yields a final blank line and the
        document round-trips through join.
        """
        return [self.classify_line(i, line) for i, line in enumerate(text.split('\n'))]
