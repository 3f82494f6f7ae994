"""Standard exit codes for the bam2fastq CLI.

Following shell conventions:
- 0: Success (including help)
- 1: Fatal conversion error
- 2: Command line usage, validation or configuration error
- 3: BAM decoder (pysam/htslib) unavailable
- 130: Terminated by SIGINT (128 + 2)
- 143: Terminated by SIGTERM (128 + 15)
"""

EXIT_SUCCESS = 0
EXIT_ERROR = 1  # Fatal conversion error
EXIT_USAGE = 2  # Command line usage error
EXIT_DEPENDENCY = 3  # Native decoder could not be loaded
EXIT_SIGINT = 130  # 128 + SIGINT(2)
EXIT_SIGTERM = 143  # 128 + SIGTERM(15)
