"""Unified constants for bam2fastq.

Values shared by the argument validator, the BAM decoder and the CLI.
"""

# ================== Command Line ==================
# Tokens that request usage text when given as the first argument
HELP_TOKENS: frozenset = frozenset({"h", "help", "?", "-h", "--help"})

# INPUT, THRESHOLD, OUTPUT
POSITIONAL_ARGUMENT_COUNT: int = 3


# ================== Read Quality ==================
# Closed interval accepted for the RQ threshold
MIN_RQ_THRESHOLD: float = 0.0
MAX_RQ_THRESHOLD: float = 1.0

# BAM aux tag carrying the CCS read quality estimate
RQ_TAG: str = "rq"


# ================== Output ==================
# Bio.SeqIO format name; "fastq" is Sanger (Phred+33)
FASTQ_FORMAT: str = "fastq"

DEFAULT_BUFFER_SIZE: int = 4096
