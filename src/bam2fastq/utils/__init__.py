"""Utility functions (bam2fastq)."""

from bam2fastq.utils.logging import get_logger, setup_logging
from bam2fastq.utils.validators import is_help_request, validate_arguments

__all__ = ["get_logger", "setup_logging", "is_help_request", "validate_arguments"]
