"""Conversion modules (bam2fastq)."""

from bam2fastq.modules.read_filter import FilterStats, RqFilter

__all__ = ["FilterStats", "RqFilter"]
