"""Shared pipeline types.

Lightweight dataclasses imported by the validator, the decoder wrapper, the
filter and the FASTQ writer without pulling in pysam or Biopython.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class CcsRead:
    """One decoded PacBio CCS record."""

    identifier: str
    sequence: str
    qualities: List[int]
    # Not clamped; PacBio writes -1 for reads without a quality estimate
    read_quality: float


@dataclass(frozen=True)
class RunArguments:
    """Validated positional arguments for one conversion run."""

    input_path: Path
    threshold: float
    output_path: Path
