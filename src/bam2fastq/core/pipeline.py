"""Streaming BAM to FASTQ conversion.

Ties the decoder, the RQ filter and the FASTQ writer together around a
single exclusively-created output file.
"""

from __future__ import annotations

import logging
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Iterator, Optional, TextIO

from bam2fastq.config import Config, OutputConfig
from bam2fastq.core.pipeline_types import RunArguments
from bam2fastq.exceptions import Bam2FastqError, ConversionError, OutputExistsError
from bam2fastq.external.ccs_bam import CcsBamReader
from bam2fastq.external.fastq import FastqWriter
from bam2fastq.modules.read_filter import FilterStats, RqFilter
from bam2fastq.utils.logging import LogTemplates, get_logger


@contextmanager
def open_fastq_output(
    path: Path,
    config: Optional[OutputConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> Iterator[TextIO]:
    """
    Create ``path`` for writing and guarantee it is closed on every exit.

    The file must not exist yet. If the body raises, the handle is closed
    and the partial file is removed unless ``keep_partial_output`` is set.

    Raises:
        OutputExistsError: If the file appeared after validation
        ConversionError: If the file cannot be created
    """
    config = config or OutputConfig()
    logger = logger or get_logger("output")
    path = Path(path)

    try:
        handle = open(path, "x", encoding="ascii", buffering=config.buffer_size, newline="\n")
    except FileExistsError as exc:
        raise OutputExistsError(
            "The output file already exists, please specify a new name or delete the old one.",
            path=path,
        ) from exc
    except OSError as exc:
        raise ConversionError(f"Could not create output file {path}: {exc}") from exc

    logger.debug(LogTemplates.FILE_OPENED.format(kind="FASTQ output", path=path))
    try:
        yield handle
    except BaseException:
        handle.close()
        if config.keep_partial_output:
            logger.warning(f"Partial output left at {path}")
        else:
            path.unlink(missing_ok=True)
            logger.warning(LogTemplates.FILE_REMOVED.format(path=path))
        raise
    else:
        handle.close()


def convert_bam_to_fastq(
    arguments: RunArguments,
    config: Optional[Config] = None,
    logger: Optional[logging.Logger] = None,
) -> FilterStats:
    """
    Convert a CCS BAM file to FASTQ, keeping reads with rq > threshold.

    Args:
        arguments: Validated input path, threshold and output path
        config: Decoder and output configuration (defaults if None)
        logger: Logger instance

    Returns:
        FilterStats for the run; the output file is closed on return

    Raises:
        DecoderUnavailableError: If pysam/htslib cannot be loaded
        FileFormatError: If a record is not a usable CCS read
        ConversionError: For any other decoding or writing failure
    """
    config = config or Config()
    logger = logger or get_logger("pipeline")

    # Constructed before the output exists so a missing decoder creates no file
    reader = CcsBamReader(arguments.input_path, config.decoder)
    read_filter = RqFilter(arguments.threshold)

    # closing() releases the BAM handle even when the writer raises mid-stream
    with closing(reader.reads()) as reads, open_fastq_output(
        arguments.output_path, config.output, logger
    ) as handle:
        writer = FastqWriter(handle)
        try:
            stats = read_filter.run(reads, writer)
        except Bam2FastqError:
            raise
        except Exception as exc:
            raise ConversionError(
                f"Failed to convert {arguments.input_path} to FASTQ "
                f"after {read_filter.stats.total_reads} reads: {exc}"
            ) from exc

    logger.info(
        LogTemplates.FILE_CREATED.format(
            path=arguments.output_path, size=arguments.output_path.stat().st_size
        )
    )
    return stats


def summarize_run(stats: FilterStats, threshold: float) -> str:
    """One-line run summary printed after the conversion finishes."""
    return (
        f"Parsed {stats.total_reads} reads and filtered out "
        f"{stats.filtered_reads} for RQ <= {threshold}"
    )
