"""Pytest configuration for bam2fastq tests."""

import array
import logging
import sys
from pathlib import Path

import pytest

# Add src directory to Python path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from bam2fastq.core.pipeline_types import CcsRead


@pytest.fixture(autouse=True)
def reset_logging_after_test():
    """Reset bam2fastq logger state after each test.

    setup_logging() sets propagate=False, which breaks caplog in later tests.
    """
    yield
    app_logger = logging.getLogger("bam2fastq")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(logging.NOTSET)
    app_logger.propagate = True


@pytest.fixture
def make_read():
    """Factory for in-memory CcsRead objects with one quality per base."""

    def _make(identifier, read_quality, sequence="ACGT", qualities=None):
        if qualities is None:
            qualities = [30] * len(sequence)
        return CcsRead(
            identifier=identifier,
            sequence=sequence,
            qualities=list(qualities),
            read_quality=read_quality,
        )

    return _make


@pytest.fixture
def ccs_bam_factory(tmp_path):
    """Write small unaligned PacBio-style BAM files with pysam.

    Each read is a tuple (name, sequence, qualities, rq); rq=None omits the
    tag. Extra flag bits can be given as a fifth element.
    """
    pysam = pytest.importorskip("pysam")

    def _write(reads, name="movie.ccs.bam"):
        path = tmp_path / name
        header = {"HD": {"VN": "1.6", "SO": "unknown"}}
        with pysam.AlignmentFile(str(path), "wb", header=header) as out:
            for read in reads:
                read_name, sequence, qualities, rq = read[:4]
                extra_flags = read[4] if len(read) > 4 else 0
                segment = pysam.AlignedSegment(out.header)
                segment.query_name = read_name
                segment.flag = 4 | extra_flags
                segment.reference_id = -1
                segment.reference_start = -1
                segment.mapping_quality = 255
                segment.query_sequence = sequence
                if qualities is not None:
                    segment.query_qualities = array.array("B", qualities)
                if rq is not None:
                    segment.set_tag("rq", rq, value_type="f")
                out.write(segment)
        return path

    return _write
