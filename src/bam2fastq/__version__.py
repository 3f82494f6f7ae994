"""Version information for bam2fastq."""

__version__ = "1.0.0"
__license__ = "GPL-2.0"
__description__ = "Convert PacBio CCS BAM files to FASTQ, filtering reads by RQ"
