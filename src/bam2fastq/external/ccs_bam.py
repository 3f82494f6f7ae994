"""PacBio CCS BAM decoding via pysam.

pysam wraps the htslib shared library; when either cannot be loaded the
reader raises DecoderUnavailableError with installation guidance instead of
failing on the first record.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from bam2fastq.config import DecoderConfig
from bam2fastq.constants import RQ_TAG
from bam2fastq.core.pipeline_types import CcsRead
from bam2fastq.exceptions import DecoderUnavailableError, FileFormatError
from bam2fastq.utils.logging import LogTemplates, get_logger

try:
    import pysam
    PYSAM_AVAILABLE = True
    PYSAM_IMPORT_ERROR: Optional[ImportError] = None
except ImportError as _exc:
    PYSAM_AVAILABLE = False
    PYSAM_IMPORT_ERROR = _exc
    pysam = None


DECODER_REMEDIATION = (
    "The BAM decoder (pysam with its bundled htslib shared libraries) could not be loaded. "
    "Install it with 'pip install pysam' or 'conda install -c bioconda pysam'. If pysam is "
    "installed, add the folder containing libhts to your library path "
    "(LD_LIBRARY_PATH, or DYLD_LIBRARY_PATH on macOS)."
)


def ensure_decoder_available() -> None:
    """Raise DecoderUnavailableError if pysam could not be imported."""
    if not PYSAM_AVAILABLE:
        raise DecoderUnavailableError(
            f"pysam is not available: {PYSAM_IMPORT_ERROR}"
        ) from PYSAM_IMPORT_ERROR


class CcsBamReader:
    """Stream CcsRead records out of a PacBio CCS BAM file."""

    def __init__(
        self,
        bam_path: Path,
        config: Optional[DecoderConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        ensure_decoder_available()
        self.bam_path = Path(bam_path)
        self.config = config or DecoderConfig()
        self.logger = logger or get_logger(self.__class__.__name__)
        self.records_seen = 0
        self.records_skipped = 0

    def _open(self):
        return pysam.AlignmentFile(
            str(self.bam_path),
            "rb",
            check_sq=self.config.check_sq,
            ignore_truncation=self.config.ignore_truncation,
        )

    def to_ccs_read(self, segment) -> CcsRead:
        """Convert one pysam AlignedSegment into a CcsRead."""
        name = segment.query_name
        if not segment.has_tag(RQ_TAG):
            raise FileFormatError(f"Read {name} has no '{RQ_TAG}' tag; is this a CCS BAM?")

        sequence = segment.query_sequence
        if not sequence:
            raise FileFormatError(f"Read {name} has no sequence")

        max_len = self.config.max_sequence_length
        if max_len is not None and len(sequence) > max_len:
            raise FileFormatError(
                f"Read {name} is {len(sequence):,} bp, longer than "
                f"decoder.max_sequence_length ({max_len:,})"
            )

        qualities = segment.query_qualities
        if qualities is None:
            raise FileFormatError(f"Read {name} has no base qualities")

        return CcsRead(
            identifier=name,
            sequence=sequence,
            qualities=list(qualities),
            read_quality=float(segment.get_tag(RQ_TAG)),
        )

    def reads(self) -> Iterator[CcsRead]:
        """
        Yield reads in file order.

        The BAM handle stays open until the generator is exhausted or
        closed; the sequence can be consumed once.
        """
        with self._open() as bam:
            self.logger.info(LogTemplates.FILE_OPENED.format(kind="BAM", path=self.bam_path))
            for segment in bam.fetch(until_eof=True):
                if self.config.skip_secondary and (
                    segment.is_secondary or segment.is_supplementary
                ):
                    self.records_skipped += 1
                    continue
                self.records_seen += 1
                yield self.to_ccs_read(segment)

        self.logger.debug(
            f"Decoded {self.records_seen} records from {self.bam_path} "
            f"({self.records_skipped} secondary/supplementary skipped)"
        )
