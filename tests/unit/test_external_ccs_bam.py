"""Tests for the pysam-backed CCS BAM reader."""

from pathlib import Path
import sys
import pytest

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from bam2fastq.config import DecoderConfig
from bam2fastq.exceptions import DecoderUnavailableError, FileFormatError
from bam2fastq.external import ccs_bam
from bam2fastq.external.ccs_bam import CcsBamReader, ensure_decoder_available

BAM_FLAG_SECONDARY = 0x100
BAM_FLAG_SUPPLEMENTARY = 0x800


class TestDecoderAvailability:
    """Missing native decoder is reported as its own error."""

    def test_missing_pysam_raises_decoder_unavailable(self, monkeypatch, tmp_path):
        import_error = ImportError("libhts.so.3: cannot open shared object file")
        monkeypatch.setattr(ccs_bam, "PYSAM_AVAILABLE", False)
        monkeypatch.setattr(ccs_bam, "PYSAM_IMPORT_ERROR", import_error)

        with pytest.raises(DecoderUnavailableError) as exc_info:
            CcsBamReader(tmp_path / "movie.ccs.bam")

        assert "libhts.so.3" in str(exc_info.value)
        assert exc_info.value.__cause__ is import_error

    def test_available_decoder_passes(self, monkeypatch):
        monkeypatch.setattr(ccs_bam, "PYSAM_AVAILABLE", True)
        ensure_decoder_available()

    def test_remediation_mentions_library_path(self):
        assert "LD_LIBRARY_PATH" in ccs_bam.DECODER_REMEDIATION
        assert "DYLD_LIBRARY_PATH" in ccs_bam.DECODER_REMEDIATION
        assert "pysam" in ccs_bam.DECODER_REMEDIATION


class TestCcsBamReader:
    """Decoding real BAM files written with pysam."""

    def test_reads_in_file_order(self, ccs_bam_factory):
        path = ccs_bam_factory(
            [
                ("m1/1/ccs", "ACGT", [40, 30, 20, 10], 0.99),
                ("m1/2/ccs", "GG", [5, 6], 0.5),
                ("m1/3/ccs", "TTT", [93, 93, 93], 0.75),
            ]
        )

        reads = list(CcsBamReader(path).reads())

        assert [r.identifier for r in reads] == ["m1/1/ccs", "m1/2/ccs", "m1/3/ccs"]
        assert reads[0].sequence == "ACGT"
        assert reads[0].qualities == [40, 30, 20, 10]
        assert reads[1].read_quality == pytest.approx(0.5)
        # rq is stored as a 32-bit float in the BAM
        assert reads[0].read_quality == pytest.approx(0.99, abs=1e-6)

    def test_reads_is_lazy(self, ccs_bam_factory):
        path = ccs_bam_factory([("a", "AC", [1, 2], 0.9), ("b", "AC", [1, 2], 0.9)])
        reader = CcsBamReader(path)

        iterator = reader.reads()
        assert reader.records_seen == 0
        next(iterator)
        assert reader.records_seen == 1
        iterator.close()

    def test_missing_rq_tag(self, ccs_bam_factory):
        path = ccs_bam_factory([("no_rq", "ACGT", [30, 30, 30, 30], None)])
        with pytest.raises(FileFormatError, match="no 'rq' tag"):
            list(CcsBamReader(path).reads())

    def test_missing_base_qualities(self, ccs_bam_factory):
        path = ccs_bam_factory([("no_qual", "ACGT", None, 0.9)])
        with pytest.raises(FileFormatError, match="no base qualities"):
            list(CcsBamReader(path).reads())

    def test_max_sequence_length(self, ccs_bam_factory):
        path = ccs_bam_factory([("long", "ACGTACGT", [30] * 8, 0.9)])
        config = DecoderConfig(max_sequence_length=4)
        with pytest.raises(FileFormatError, match="max_sequence_length"):
            list(CcsBamReader(path, config).reads())

    def test_secondary_and_supplementary_skipped_by_default(self, ccs_bam_factory):
        path = ccs_bam_factory(
            [
                ("primary", "ACGT", [30] * 4, 0.9),
                ("primary", "ACGT", [30] * 4, 0.9, BAM_FLAG_SECONDARY),
                ("primary", "ACGT", [30] * 4, 0.9, BAM_FLAG_SUPPLEMENTARY),
            ]
        )
        reader = CcsBamReader(path)

        reads = list(reader.reads())

        assert len(reads) == 1
        assert reader.records_seen == 1
        assert reader.records_skipped == 2

    def test_secondary_kept_when_configured(self, ccs_bam_factory):
        path = ccs_bam_factory(
            [
                ("primary", "ACGT", [30] * 4, 0.9),
                ("primary", "ACGT", [30] * 4, 0.9, BAM_FLAG_SECONDARY),
            ]
        )
        reads = list(CcsBamReader(path, DecoderConfig(skip_secondary=False)).reads())
        assert len(reads) == 2

    def test_not_a_bam_file(self, tmp_path):
        pytest.importorskip("pysam")
        path = tmp_path / "not.bam"
        path.write_text("this is not a BAM file\n")
        with pytest.raises((OSError, ValueError)):
            list(CcsBamReader(path).reads())
