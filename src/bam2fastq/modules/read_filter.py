"""
Read Filter - CCS Read Quality Gate

This module decides, read by read, whether a CCS read is written to the
FASTQ output or discarded, based on its `rq` estimate.

Key features:
- Strict comparison: a read passes only when rq > threshold
- Streaming: each accepted read is handed to the writer before the next
  read is pulled from the decoder, so input order is preserved
- Every read is counted exactly once, as retained or filtered
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from bam2fastq.core.pipeline_types import CcsRead
from bam2fastq.utils.logging import LogTemplates, get_logger


class ReadSink(Protocol):
    def write(self, read: CcsRead) -> None: ...


@dataclass
class FilterStats:
    """Statistics for one filtering run."""

    total_reads: int = 0
    filtered_reads: int = 0

    @property
    def retained_reads(self) -> int:
        return self.total_reads - self.filtered_reads

    @property
    def filtered_percentage(self) -> float:
        if self.total_reads == 0:
            return 0.0
        return (self.filtered_reads / self.total_reads) * 100

    @property
    def retained_percentage(self) -> float:
        if self.total_reads == 0:
            return 0.0
        return (self.retained_reads / self.total_reads) * 100


class RqFilter:
    """Keep CCS reads whose read quality exceeds a fixed threshold."""

    def __init__(self, threshold: float, logger: Optional[logging.Logger] = None) -> None:
        self.threshold = threshold
        self.logger = logger or get_logger(self.__class__.__name__)
        self.stats = FilterStats()

    def accepts(self, read: CcsRead) -> bool:
        return read.read_quality > self.threshold

    def run(self, reads: Iterable[CcsRead], writer: ReadSink) -> FilterStats:
        """
        Stream reads through the quality gate.

        Args:
            reads: Decoded reads, consumed once in order
            writer: Sink receiving each accepted read

        Returns:
            FilterStats object with filtering statistics
        """
        for read in reads:
            self.stats.total_reads += 1
            if self.accepts(read):
                writer.write(read)
            else:
                self.stats.filtered_reads += 1
                if self.logger.isEnabledFor(logging.DEBUG):
                    self.logger.debug(
                        LogTemplates.READ_REJECTED.format(
                            read_id=read.identifier,
                            rq=read.read_quality,
                            threshold=self.threshold,
                        )
                    )

        self.logger.info(
            LogTemplates.FILTERING_STATS.format(
                kept=self.stats.retained_reads,
                removed=self.stats.filtered_reads,
                percent=self.stats.retained_percentage,
            )
        )
        return self.stats
