#!/usr/bin/env python3
"""
YAMLMEND HEALING CONTEXT
------------------------
A state-management object that acts as the 'Medical Record' for a text
undergoing repair. It stores the raw trauma, each stage's output and the
final verdict of the Validation Gate.

Author: YamlMend Team
Date: 2026-10-19
"""

from dataclasses import dataclass, field
from typing import List, Optional

from yamlmend.core.models import FixResult, SourceLine


@dataclass
class HealContext:
    """
    Maintains the state of a single repair session.

    This object is created by the HealingPipeline and enriched by the
    Normalizer, Classifier, Reconstructor and Gate sequentially. Nothing
    in it survives into the next session.
    """
    raw_text: str                                      # The initial paste
    normalized_text: str = ""                          # After surface cleanup
    lines: List[SourceLine] = field(default_factory=list)
    reconstructed_text: str = ""                       # After list realignment
    result: Optional[FixResult] = None                 # Verdict of the gate

    @property
    def healed(self) -> bool:
        return self.result is not None and self.result.ok
