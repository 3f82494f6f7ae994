"""Configuration management for bam2fastq."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any
import yaml
from bam2fastq.constants import DEFAULT_BUFFER_SIZE
from bam2fastq.exceptions import ConfigurationError


VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class DecoderConfig:
    """BAM decoder tuning, passed to the reader at construction."""

    # CCS BAMs are unaligned and usually carry no @SQ lines
    check_sq: bool = False
    ignore_truncation: bool = False
    # Reject records longer than this many bases (None disables the limit)
    max_sequence_length: Optional[int] = None
    skip_secondary: bool = True


@dataclass
class OutputConfig:
    """FASTQ output configuration."""

    buffer_size: int = DEFAULT_BUFFER_SIZE
    # Leave a partially written FASTQ on disk after a fatal error
    keep_partial_output: bool = False


@dataclass
class RuntimeConfig:
    """Runtime configuration."""

    log_level: str = "WARNING"
    log_file: Optional[Path] = None


@dataclass
class Config:
    """Main configuration class."""

    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    @property
    def log_level(self) -> int:
        return getattr(logging, self.runtime.log_level.upper())

    def validate(self) -> None:
        """Validate configuration."""
        if self.output.buffer_size < 1:
            raise ConfigurationError("output.buffer_size must be >= 1")
        max_len = self.decoder.max_sequence_length
        if max_len is not None and max_len < 1:
            raise ConfigurationError("decoder.max_sequence_length must be >= 1 or null")
        if str(self.runtime.log_level).upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid runtime.log_level: {self.runtime.log_level!r}. "
                f"Expected one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""

        def path_to_str(obj):
            if isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, dict):
                return {k: path_to_str(v) for k, v in obj.items()}
            return obj

        return path_to_str(asdict(self))


def load_config(path: Path) -> Config:
    """Load configuration from YAML file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse config file {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    cfg = Config()
    sections = {"decoder": cfg.decoder, "output": cfg.output, "runtime": cfg.runtime}

    unknown = [key for key in data if key not in sections]
    if unknown:
        raise ConfigurationError("Unsupported config option(s): " + ", ".join(sorted(unknown)))

    for name, section in sections.items():
        values = data.get(name) or {}
        if not isinstance(values, dict):
            raise ConfigurationError(f"Config section '{name}' must be a mapping")
        for key, value in values.items():
            if not hasattr(section, key):
                raise ConfigurationError(f"Unsupported config option: {name}.{key}")
            if key == "log_file" and value:
                value = Path(value)
            setattr(section, key, value)

    cfg.validate()
    return cfg
