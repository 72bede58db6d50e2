#!/usr/bin/env python3
"""
YAMLMEND VALIDATION GATE - The Judge
------------------------------------
The final safety gate of the healing pipeline. It attempts a strict
structural parse and either canonicalizes the document or reports a
located diagnostic.

Parser failures never escape this module: ruamel.yaml errors are turned
into a typed YamlParseError at the parser seam and into an Invalid result
at the gate boundary.

Author: YamlMend Team
Date: 2026-10-19
"""

import logging
from typing import Optional

from ruamel.yaml import YAML, YAMLError
from ruamel.yaml.error import MarkedYAMLError

from yamlmend.core.config import DEFAULT_OPTIONS, HealOptions
from yamlmend.core.errors import YamlParseError
from yamlmend.core.models import (
    ErrorPosition,
    FixResult,
    Formatted,
    Invalid,
    ParsedYAML,
    Valid,
    ValidateResult,
)
from yamlmend.healing.exporter import CanonicalExporter

logger = logging.getLogger("yamlmend.gate")


def _position_of(error: MarkedYAMLError) -> Optional[ErrorPosition]:
    """Converts ruamel's 0-based mark into a 1-based position."""
    mark = error.problem_mark or error.context_mark
    if mark is None:
        return None
    return ErrorPosition(line=mark.line + 1, column=mark.column + 1)


def _message_of(error: YAMLError) -> str:
    if isinstance(error, MarkedYAMLError):
        parts = [part for part in (error.context, error.problem) if part]
        if parts:
            return ", ".join(parts)
    return str(error).strip() or error.__class__.__name__


class StrictParser:
    """Adapter over the ruamel.yaml round-trip loader."""

    def _make_yaml(self) -> YAML:
        yaml = YAML(typ='rt')
        yaml.preserve_quotes = True
        return yaml

    def parse(self, text: str) -> ParsedYAML:
        """
        Loads every document of `text`.

        Raises:
            YamlParseError: with the parser's message and, when offered,
                the position of the first structural error.
        """
        try:
            documents = list(self._make_yaml().load_all(text))
        except MarkedYAMLError as e:
            raise YamlParseError(_message_of(e), _position_of(e)) from e
        except YAMLError as e:
            raise YamlParseError(_message_of(e)) from e
        except RecursionError as e:
            raise YamlParseError("document is nested too deeply to parse") from e
        except (ValueError, TypeError, KeyError) as e:
            # The constructor rejects well-formed tags it cannot convert ("!!int abc").
            raise YamlParseError(f"cannot construct value: {e}") from e
        return ParsedYAML(documents=documents)


class ValidationGate:
    """
    Strict parse + canonical export. Every call yields a result value.
    """

    def __init__(self, options: HealOptions = DEFAULT_OPTIONS):
        self.parser = StrictParser()
        self.exporter = CanonicalExporter(options)

    def check(self, text: str) -> ValidateResult:
        """Parse only; the input is never modified."""
        try:
            self.parser.parse(text)
        except YamlParseError as e:
            logger.debug("Validation failed: %s", e.describe())
            return Invalid(text=text, message=e.describe(), position=e.position)
        return Valid()

    def canonicalize(self, text: str) -> FixResult:
        """
        Parses `text` and re-serializes it. On failure the given text is
        preserved on the Invalid result for the user to inspect.
        """
        try:
            parsed = self.parser.parse(text)
        except YamlParseError as e:
            logger.warning("Strict parse failed: %s", e.describe())
            return Invalid(text=text, message=e.describe(), position=e.position)
        return Formatted(text=self.exporter.export(parsed.documents))
