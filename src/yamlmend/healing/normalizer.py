#!/usr/bin/env python3
"""
YAMLMEND NORMALIZER - Surface Cleanup (Phase 1.1)
-------------------------------------------------
Repairs character-level trauma before any structure is inferred:
line endings, tabs, trailing whitespace and stray trailing commas.

The transform is pure and total. It never changes the number of lines,
so positions reported by later stages still map onto the user's input.

Author: YamlMend Team
Date: 2026-10-19
"""

import re

# A comma whose next non-space character is a line break or a closing bracket.
TRAILING_COMMA = re.compile(r',(\s*(?:\n|\]|\}))')
TRAILING_SPACE = re.compile(r'[^\S\n]+$', re.MULTILINE)


class TextNormalizer:
    """Stateless cleanup applied to the raw paste."""

    def __init__(self, tab_width: int = 2):
        self.tab = ' ' * tab_width

    def _clean_artifacts(self, text: str) -> str:
        """
        Removes invisible UTF-8 BOM markers and standardizes line endings.
        """
        text = text.lstrip('\ufeff')
        return text.replace('\r\n', '\n').replace('\r', '\n')

    def _strip_trailing_whitespace(self, text: str) -> str:
        return TRAILING_SPACE.sub('', text)

    def _drop_trailing_commas(self, text: str) -> str:
        """
        Fixes "a: [1, 2,]" and "- x," style leftovers from JSON pastes.
        Runs to a fixed point so ",," and ", ," tails disappear in one call.
        """
        while True:
            fixed = TRAILING_COMMA.sub(r'\1', text)
            if fixed == text:
                return fixed
            text = fixed

    def normalize(self, text: str) -> str:
        if not text:
            return ""
        text = self._clean_artifacts(text)
        text = text.replace('\t', self.tab)
        text = self._strip_trailing_whitespace(text)
        text = self._drop_trailing_commas(text)
        # Removing a comma can expose whitespace that preceded it.
        return self._strip_trailing_whitespace(text)


def normalize(text: str) -> str:
    """Module-level shortcut used by the operations API."""
    return TextNormalizer().normalize(text)
