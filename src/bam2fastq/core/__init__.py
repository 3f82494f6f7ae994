"""Core conversion functionality (bam2fastq).

``bam2fastq.core.pipeline`` is imported explicitly by callers since it pulls
in the pysam and Biopython wrappers.
"""

from bam2fastq.core.pipeline_types import CcsRead, RunArguments

__all__ = ["CcsRead", "RunArguments"]
