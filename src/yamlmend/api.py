"""
Operations exposed to editor surfaces: validate, format and auto-fix.

Each call is independent, synchronous and re-entrant; no state survives
between calls.
"""

from typing import Optional

from yamlmend.core.config import DEFAULT_OPTIONS, HealOptions
from yamlmend.core.models import FixResult, HealReport, ValidateResult
from yamlmend.healing.pipeline import HealingPipeline
from yamlmend.healing.reconstructor import healing_report
from yamlmend.validator.gate import ValidationGate


def validate(text: str) -> ValidateResult:
    """Strict parse only. No reconstruction, no mutation."""
    return ValidationGate().check(text)


def format_yaml(text: str, options: HealOptions = DEFAULT_OPTIONS) -> FixResult:
    """Strict parse + canonical serialize. No heuristic repair is attempted."""
    return ValidationGate(options).canonicalize(text)


def auto_fix(text: str, options: Optional[HealOptions] = None) -> FixResult:
    """Normalizer -> Classifier -> Reconstructor -> Validation Gate."""
    return HealingPipeline(options or DEFAULT_OPTIONS).auto_fix(text)


def heal_report(original: str, result: FixResult) -> HealReport:
    status = "FORMATTED" if result.ok else "INVALID"
    return healing_report(original, result.text, status)
