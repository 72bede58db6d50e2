#!/usr/bin/env python3
"""
YAMLMEND HEALING PIPELINE - The Chief Surgeon
---------------------------------------------
The central coordinator for the auto-fix phase. It ensures raw text is
processed in a strict sequence:

    Normalizer -> Classifier -> Reconstructor -> Validation Gate

and records every intermediate on a HealContext for inspection.

Author: YamlMend Team
Date: 2026-10-19
"""

import logging

from yamlmend.core.config import DEFAULT_OPTIONS, HealOptions
from yamlmend.core.errors import UnrecoverableInput
from yamlmend.core.models import FixResult, Invalid
from yamlmend.healing.classifier import LineClassifier
from yamlmend.healing.context import HealContext
from yamlmend.healing.normalizer import TextNormalizer
from yamlmend.healing.reconstructor import IndentReconstructor
from yamlmend.validator.gate import ValidationGate

logger = logging.getLogger("yamlmend.pipeline")

FALLBACK_MESSAGE = "YAML has syntax errors that cannot be automatically corrected"


class HealingPipeline:
    """
    The Orchestrator: surface cleanup, classification, realignment and the
    strict gate happen in a strictly defined order.
    """

    def __init__(self, options: HealOptions = DEFAULT_OPTIONS):
        self.options = options
        self.normalizer = TextNormalizer(tab_width=options.indent)
        self.classifier = LineClassifier()
        self.reconstructor = IndentReconstructor(
            indent=options.indent,
            reset_list_on_blank=options.reset_list_on_blank,
        )
        self.gate = ValidationGate(options)

    def run(self, input_text: str) -> HealContext:
        """
        Executes the full sequence and returns the populated context.
        Each phase builds upon the last.
        """
        context = HealContext(raw_text=input_text)
        self._run_phases(context)
        return context

    def _run_phases(self, context: HealContext):
        """Fills `context` stage by stage; earlier stages survive a later failure."""
        input_text = context.raw_text

        # --- PHASE 1: SURFACE CLEANUP ---
        context.normalized_text = self.normalizer.normalize(input_text)

        # --- PHASE 2: CLASSIFICATION ---
        context.lines = self.classifier.classify(context.normalized_text)

        # --- PHASE 3: LIST REALIGNMENT ---
        context.reconstructed_text = self.reconstructor.reconstruct(context.lines)

        # --- PHASE 4: STRICT GATE ---
        context.result = self.gate.canonicalize(context.reconstructed_text)

        logger.debug(
            "Healed %d lines: %s",
            len(context.lines),
            "formatted" if context.healed else "invalid",
        )

    def auto_fix(self, input_text: str) -> FixResult:
        """
        Boundary of the auto-fix operation: always returns a FixResult.
        When a stage fails unexpectedly, the furthest text reached so far
        is kept as the best-effort output.
        """
        context = HealContext(raw_text=input_text)
        try:
            self._run_phases(context)
            return context.result
        except Exception as e:
            logger.error(f"Auto-fix aborted: {e}")
            best_effort = context.reconstructed_text or context.normalized_text or input_text
            return Invalid(text=best_effort, message=str(e) or FALLBACK_MESSAGE)

    def heal(self, input_text: str) -> str:
        """
        Exception-style variant for scripting: returns the canonical text.

        Raises:
            UnrecoverableInput: the reconstructed text still fails strict
                parsing. The best-effort text travels on the exception.
        """
        context = self.run(input_text)
        if not context.healed:
            result = context.result
            raise UnrecoverableInput(result.message, text=result.text, position=result.position)
        return context.result.text
