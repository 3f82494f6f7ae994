"""bam2fastq: PacBio CCS BAM to FASTQ conversion with read-quality filtering."""

from bam2fastq.__version__ import __version__

__all__ = ["__version__"]
