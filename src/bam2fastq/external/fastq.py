"""FASTQ encoding of CCS reads via Biopython."""

from __future__ import annotations

from typing import TextIO

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from bam2fastq.constants import FASTQ_FORMAT
from bam2fastq.core.pipeline_types import CcsRead


def to_seq_record(read: CcsRead) -> SeqRecord:
    """Build a SeqRecord whose FASTQ header is exactly ``@<identifier>``."""
    return SeqRecord(
        Seq(read.sequence),
        id=read.identifier,
        name=read.identifier,
        description="",
        letter_annotations={"phred_quality": list(read.qualities)},
    )


class FastqWriter:
    """Append Sanger (Phred+33) FASTQ records to an open text handle."""

    def __init__(self, handle: TextIO) -> None:
        self.handle = handle
        self.records_written = 0

    def write(self, read: CcsRead) -> None:
        """Write one 4-line FASTQ block for ``read``."""
        SeqIO.write(to_seq_record(read), self.handle, FASTQ_FORMAT)
        self.records_written += 1
