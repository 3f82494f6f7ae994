"""Custom exceptions for bam2fastq."""


class Bam2FastqError(Exception):
    """Base exception for all bam2fastq errors."""

    pass


class ConfigurationError(Bam2FastqError):
    """Raised when configuration is invalid or missing."""

    pass


class ValidationError(Bam2FastqError):
    """Raised when command line arguments fail validation."""

    pass


class ArgumentCountError(ValidationError):
    """Raised when the number of positional arguments is not three."""

    pass


class InputNotFoundError(ValidationError):
    """Raised when the input BAM file does not exist."""

    def __init__(self, message="", path=None):
        super().__init__(message)
        self.path = path


class ThresholdParseError(ValidationError):
    """Raised when the RQ threshold is not a decimal number."""

    def __init__(self, message="", token=None):
        super().__init__(message)
        self.token = token


class ThresholdRangeError(ValidationError):
    """Raised when the RQ threshold lies outside [0, 1]."""

    def __init__(self, message="", value=None):
        super().__init__(message)
        self.value = value


class OutputExistsError(ValidationError):
    """Raised when the output path already exists."""

    def __init__(self, message="", path=None):
        super().__init__(message)
        self.path = path


class DependencyError(Bam2FastqError):
    """Raised when required dependencies are missing or incompatible."""

    pass


class DecoderUnavailableError(DependencyError):
    """Raised when the native BAM decoder (pysam/htslib) cannot be loaded."""

    pass


class FileFormatError(Bam2FastqError):
    """Raised when a BAM record cannot be turned into a CCS read."""

    pass


class ConversionError(Bam2FastqError):
    """Raised when decoding or FASTQ writing fails during a run."""

    pass
