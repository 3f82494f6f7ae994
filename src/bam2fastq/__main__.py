"""Package entry point for ``python -m bam2fastq``."""

import sys
from bam2fastq.cli import main

if __name__ == "__main__":
    sys.exit(main())
