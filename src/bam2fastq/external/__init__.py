"""Wrappers around the third-party decoder and encoder (bam2fastq).

- CcsBamReader: PacBio CCS BAM decoding through pysam/htslib
- FastqWriter: Sanger FASTQ encoding through Biopython
"""

from bam2fastq.external.ccs_bam import CcsBamReader, ensure_decoder_available
from bam2fastq.external.fastq import FastqWriter

__all__ = ["CcsBamReader", "FastqWriter", "ensure_decoder_available"]
