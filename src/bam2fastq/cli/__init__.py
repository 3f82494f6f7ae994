"""Command line interface (bam2fastq)."""

from bam2fastq.cli.main import cli, main

__all__ = ["cli", "main"]
