"""Click application entrypoint for bam2fastq."""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from pathlib import Path
from types import FrameType
from typing import Iterator, Optional, Tuple

import click

from bam2fastq import __version__
from bam2fastq.cli.exit_codes import (
    EXIT_SUCCESS,
    EXIT_ERROR,
    EXIT_USAGE,
    EXIT_DEPENDENCY,
    EXIT_SIGINT,
    EXIT_SIGTERM,
)
from bam2fastq.config import Config, load_config
from bam2fastq.core.pipeline import convert_bam_to_fastq, summarize_run
from bam2fastq.exceptions import (
    ArgumentCountError,
    ConfigurationError,
    DecoderUnavailableError,
    ValidationError,
)
from bam2fastq.external.ccs_bam import DECODER_REMEDIATION
from bam2fastq.utils.logging import attach_log_file, get_logger, setup_logging
from bam2fastq.utils.validators import is_help_request, validate_arguments

_received_signal: Optional[int] = None


def _handle_signal(signum: int, frame: Optional[FrameType]) -> None:
    """Handle interrupt signals for graceful shutdown."""
    global _received_signal
    _received_signal = signum
    sig_name = "SIGINT" if signum == signal.SIGINT else "SIGTERM"
    click.echo(f"\n{sig_name} received, stopping conversion...", err=True)
    # Unwinds through the output context manager, which removes partial output
    raise KeyboardInterrupt(f"{sig_name} received")


def _print_version(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if value and not ctx.resilient_parsing:
        click.echo(f"bam2fastq {__version__}")
        ctx.exit()


def _iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Yield the chain of underlying exceptions, innermost last."""
    seen = {id(exc)}
    current = exc.__cause__ or (None if exc.__suppress_context__ else exc.__context__)
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or (
            None if current.__suppress_context__ else current.__context__
        )


def _report_fatal(exc: BaseException, header: str, guidance: Optional[str] = None) -> None:
    click.echo(header, err=True)
    if guidance:
        click.echo(guidance, err=True)
    click.echo(f"Error: {exc}", err=True)
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    click.echo(trace.rstrip(), err=True)
    for cause in _iter_causes(exc):
        click.echo(f"Inner exception: {cause}", err=True)


def _resolve_log_level(verbose: int, cfg: Config) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return cfg.log_level


@click.command(
    context_settings=dict(ignore_unknown_options=True, help_option_names=[]),
    add_help_option=False,
)
@click.option(
    "-V",
    "--version",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_print_version,
    help="Show the version and exit.",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file (YAML)",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase log verbosity (-v for INFO, -vv for DEBUG)",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    help="Path for log file output",
)
@click.argument("tokens", nargs=-1, type=click.UNPROCESSED, metavar="INPUT THRESHOLD OUTPUT")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    verbose: int,
    log_file: Optional[Path],
    tokens: Tuple[str, ...],
) -> None:
    """Convert PacBio CCS reads in a BAM file to FASTQ.

    Reads whose RQ is greater than THRESHOLD are written to OUTPUT; the
    rest are counted as filtered. Use h, help, ? or -h to show this text.

    \b
    INPUT     - the input ccs.bam file
    THRESHOLD - [0,1] RQ threshold for output
    OUTPUT    - a FASTQ filename to output (must not exist)
    """
    if is_help_request(tokens):
        click.echo(ctx.get_help(), color=ctx.color)
        sys.exit(EXIT_SUCCESS)

    try:
        cfg = load_config(config_path) if config_path else Config()
    except ConfigurationError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(EXIT_USAGE)

    try:
        arguments = validate_arguments(tokens)
    except ArgumentCountError as exc:
        click.echo(str(exc), err=True)
        click.echo(ctx.get_help(), err=True)
        sys.exit(EXIT_USAGE)
    except ValidationError as exc:
        click.echo(str(exc), err=True)
        sys.exit(EXIT_USAGE)

    # Only a validated run may create the log file
    setup_logging(level=_resolve_log_level(verbose, cfg))
    run_log = log_file or cfg.runtime.log_file
    if run_log:
        attach_log_file(run_log)
    logger = get_logger("cli")

    logger.info(
        f"Converting {arguments.input_path} -> {arguments.output_path} "
        f"(RQ > {arguments.threshold})"
    )

    try:
        stats = convert_bam_to_fastq(arguments, cfg)
    except KeyboardInterrupt:
        logger.info("Conversion interrupted")
        sys.exit(EXIT_SIGTERM if _received_signal == signal.SIGTERM else EXIT_SIGINT)
    except DecoderUnavailableError as exc:
        logger.debug("Decoder unavailable", exc_info=True)
        _report_fatal(
            exc,
            "Error thrown when attempting to read the CCS BAM file.",
            guidance=DECODER_REMEDIATION,
        )
        sys.exit(EXIT_DEPENDENCY)
    except ValidationError as exc:
        # Output appeared between validation and creation
        click.echo(str(exc), err=True)
        sys.exit(EXIT_USAGE)
    except Exception as exc:
        logger.debug("Conversion failed", exc_info=True)
        _report_fatal(exc, "Error thrown when attempting to generate the FASTQ file")
        sys.exit(EXIT_ERROR)

    summary = summarize_run(stats, arguments.threshold)
    logger.info(summary)
    click.echo(summary)


def main(argv: list[str] | None = None) -> int:
    """Main entry point with signal handling."""
    global _received_signal
    _received_signal = None
    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    try:
        cli(argv, prog_name="bam2fastq")
        return EXIT_SUCCESS
    except KeyboardInterrupt:
        return EXIT_SIGTERM if _received_signal == signal.SIGTERM else EXIT_SIGINT
    except SystemExit as exc:
        # Preserve explicit exit codes from cli()
        if exc.code is None:
            return EXIT_SUCCESS
        return exc.code if isinstance(exc.code, int) else EXIT_ERROR
    except Exception as exc:
        click.echo(f"Error: {exc}", err=True)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
