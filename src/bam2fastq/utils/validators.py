"""Command line validation for bam2fastq.

Every check here runs before the output file is created, so a failed
validation never leaves anything behind on disk.
"""

from __future__ import annotations

import math
import re
from pathlib import Path
from typing import Sequence

from bam2fastq.constants import (
    HELP_TOKENS,
    MAX_RQ_THRESHOLD,
    MIN_RQ_THRESHOLD,
    POSITIONAL_ARGUMENT_COUNT,
)
from bam2fastq.core.pipeline_types import RunArguments
from bam2fastq.exceptions import (
    ArgumentCountError,
    InputNotFoundError,
    OutputExistsError,
    ThresholdParseError,
    ThresholdRangeError,
)

# Plain ASCII decimal with optional exponent; no underscores, nan or inf
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def is_help_request(tokens: Sequence[str]) -> bool:
    """Return True when the first token asks for usage text."""
    return len(tokens) > 0 and tokens[0] in HELP_TOKENS


def parse_threshold(token: str) -> float:
    """
    Parse and range-check the RQ threshold.

    Args:
        token: Raw command line token

    Returns:
        Threshold in the closed interval [0, 1]

    Raises:
        ThresholdParseError: If the token is not a finite decimal number
        ThresholdRangeError: If the value lies outside [0, 1]
    """
    text = token.strip() if isinstance(token, str) else ""
    value = float(text) if DECIMAL_PATTERN.fullmatch(text) else math.nan
    if not math.isfinite(value):
        raise ThresholdParseError(
            f"Could not parse minimum threshold from : {token} "
            f"expected decimal number in [0,1] interval.",
            token=token,
        )

    if value < MIN_RQ_THRESHOLD or value > MAX_RQ_THRESHOLD:
        raise ThresholdRangeError(
            f"Minimum RQ value: {value} was not in [0,1] interval.", value=value
        )
    return value


def validate_arguments(tokens: Sequence[str]) -> RunArguments:
    """
    Validate the positional arguments INPUT THRESHOLD OUTPUT.

    Checks run in order: argument count, input existence, threshold
    parsing, threshold range, output collision. Help tokens must be
    handled by the caller with ``is_help_request`` first.

    Args:
        tokens: Positional tokens from the command line

    Returns:
        RunArguments with the parsed threshold

    Raises:
        ValidationError subclass describing the first failed check
    """
    if len(tokens) > POSITIONAL_ARGUMENT_COUNT:
        raise ArgumentCountError("Too many arguments")
    if len(tokens) < POSITIONAL_ARGUMENT_COUNT:
        raise ArgumentCountError("Not enough arguments")

    input_token, threshold_token, output_token = tokens

    input_path = Path(input_token)
    if not input_path.is_file():
        raise InputNotFoundError(f"Can't find file: {input_token}", path=input_path)

    threshold = parse_threshold(threshold_token)

    output_path = Path(output_token)
    if output_path.exists():
        raise OutputExistsError(
            "The output file already exists, please specify a new name or delete the old one.",
            path=output_path,
        )

    return RunArguments(input_path=input_path, threshold=threshold, output_path=output_path)
