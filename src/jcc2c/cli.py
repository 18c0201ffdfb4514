"""jcc2c CLI: convert a JaCoCo XML report into a Cobertura XML report."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.logging import RichHandler

from jcc2c import __version__
from jcc2c.config import CONFIG_FILENAME, load_config, validate_config
from jcc2c.converter import ReportConverter
from jcc2c.document import STDIO_PATH
from jcc2c.errors import ConfigError, ConversionError
from jcc2c.reporter import console, reporter

logger = logging.getLogger(__name__)

_DEFAULT_SOURCE_ROOT = "."


def _configure_logging(*, verbose: bool) -> None:
    package_logger = logging.getLogger("jcc2c")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.addHandler(RichHandler(console=console, show_path=False, show_time=False))
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


def _source_roots(source_dirs: tuple[Path, ...], configured: list[str]) -> list[str]:
    if source_dirs:
        return [str(source_dir) for source_dir in source_dirs]
    if configured:
        return list(configured)
    return [_DEFAULT_SOURCE_ROOT]


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-i",
    "--input",
    "input_path",
    required=True,
    metavar="FILE",
    help="Path to JaCoCo XML coverage report input file ('-' for stdin).",
)
@click.option(
    "-o",
    "--output",
    "output_path",
    required=True,
    metavar="FILE",
    help="Path to Cobertura XML coverage report output file ('-' for stdout).",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Configuration file (default: ./{CONFIG_FILENAME} when present).",
)
@click.option(
    "--source-extension",
    default=None,
    metavar="EXT",
    help="Source file extension used to guess class filenames (default: java).",
)
@click.option(
    "--legacy-branch-percentage",
    is_flag=True,
    help="Compute per-line branch percentages with integer division, as older releases did.",
)
@click.option("-q", "--quiet", is_flag=True, help="Do not print the coverage summary.")
@click.option("--verbose", is_flag=True, help="Log progress and debug details to stderr.")
@click.version_option(__version__, "-v", "--version", prog_name="jcc2c")
@click.argument(
    "source_dirs",
    nargs=-1,
    metavar="[SOURCE DIR]...",
    type=click.Path(path_type=Path),
)
def cli(
    input_path: str,
    output_path: str,
    config_path: Path | None,
    source_extension: str | None,
    source_dirs: tuple[Path, ...],
    *,
    legacy_branch_percentage: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Convert a JaCoCo XML coverage report into a Cobertura XML coverage report.

    SOURCE DIRs (default: .) are recorded verbatim in the report.
    """
    _configure_logging(verbose=verbose)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        reporter.print_error(str(e))
        sys.exit(1)

    if source_extension is not None:
        config.conversion.source_extension = source_extension
    if legacy_branch_percentage:
        config.conversion.legacy_branch_percentage = True

    errors = validate_config(config)
    if errors:
        for error in errors:
            reporter.print_error(error)
        sys.exit(1)

    converter = ReportConverter(
        source_extension=config.conversion.source_extension,
        legacy_branch_percentage=config.conversion.legacy_branch_percentage,
    )
    roots = _source_roots(source_dirs, config.sources)
    logger.debug("Source roots: %s", roots)

    try:
        report = converter.convert(input_path, output_path, roots)
    except ConversionError as e:
        logger.debug("Conversion failed", exc_info=True)
        reporter.print_error(str(e))
        sys.exit(1)

    if quiet:
        return
    if not report.packages:
        reporter.print_warning("The JaCoCo report contains no packages")
    if not config.output.summary:
        return
    reporter.print_coverage_summary(report)
    destination = "stdout" if output_path == STDIO_PATH else output_path
    reporter.print_success(f"Cobertura report written to {destination}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
