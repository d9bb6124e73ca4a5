"""
CLI for codedump.

Provides the command-line interface for dumping a directory tree into a
single text file and for writing a starter configuration file.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import find_dotenv, load_dotenv
from rich.console import Console

from codedump import __version__
from codedump.cli.ui import (
    display_path,
    render_error,
    render_largest_files,
    render_success,
    render_warning,
)
from codedump.core.config import (
    CONFIG_FILENAMES,
    OUTPUT_TYPES,
    CodeDumpConfig,
    LoggingConfig,
    load_config,
)
from codedump.core.emitter import OutputFormat
from codedump.core.errors import CodeDumpError
from codedump.services import DumpService

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="codedump",
    help="Concatenate a source tree into a single text file",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"codedump {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
):
    """Dump a codebase into one text file for review or LLM context."""


def configure_logging(config: LoggingConfig, level_override: Optional[str] = None) -> None:
    """
    Configure the root logger once per invocation.

    Raises:
        ValueError: If the level name is unknown
    """
    level_name = (level_override or config.level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {level_name}")
    logging.basicConfig(level=level, format=config.format, force=True)


def resolve_output_format(
    type_option: Optional[str],
    list_flag: bool,
    normal_flag: bool,
    verbose_flag: bool,
    minify_flag: bool,
    default: str,
) -> OutputFormat:
    """
    Pick the output format from the command line, falling back to ``default``.

    Raises:
        ValueError: If more than one format is requested or the name is unknown
    """
    flags = {
        OutputFormat.LIST: list_flag,
        OutputFormat.NORMAL: normal_flag,
        OutputFormat.VERBOSE: verbose_flag,
        OutputFormat.MINIFY: minify_flag,
    }
    selected = [fmt for fmt, enabled in flags.items() if enabled]
    if type_option is not None:
        type_name = type_option.lower()
        if type_name not in OUTPUT_TYPES:
            raise ValueError(
                f"Invalid output type: {type_option}. Valid types: {', '.join(OUTPUT_TYPES)}"
            )
        selected.append(OutputFormat(type_name))

    if len(set(selected)) > 1:
        raise ValueError("Only one output format may be selected")
    if selected:
        return selected[0]
    return OutputFormat(default)


def _load_cli_config(config_path: Optional[Path]) -> CodeDumpConfig:
    # .env is read before the config so CODEDUMP_* variables can come from it
    load_dotenv(find_dotenv(usecwd=True))
    return load_config(config_path)


@app.command()
def dump(
    directory: Optional[Path] = typer.Argument(
        None, help="Directory to dump (default: current directory)"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file (default: <directory name>.txt)"
    ),
    output_type: Optional[str] = typer.Option(
        None, "--type", help="Output format: list, normal, verbose, or minify"
    ),
    list_flag: bool = typer.Option(False, "--list", "-l", help="Only list file paths"),
    normal_flag: bool = typer.Option(False, "--normal", "-n", help="Paths and raw content"),
    verbose_flag: bool = typer.Option(
        False, "--verbose", "-v", help="Paths, metadata and raw content"
    ),
    minify_flag: bool = typer.Option(
        False, "--minify", "-m", help="Paths and whitespace-minified content"
    ),
    top_n: Optional[int] = typer.Option(
        None, "--top-n", "-t", help="Number of largest files to show"
    ),
    largest_files: Optional[bool] = typer.Option(
        None, "--largest-files/--no-largest-files", help="Show/hide the largest files table"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file (YAML or JSON)"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
):
    """Dump a directory tree into a single text file."""
    try:
        cfg = _load_cli_config(config_path)
        configure_logging(cfg.logging, log_level)
        fmt = resolve_output_format(
            output_type, list_flag, normal_flag, verbose_flag, minify_flag, cfg.dump.type
        )
    except (FileNotFoundError, ValueError) as e:
        render_error(str(e), console)
        raise typer.Exit(1)

    # CLI arguments take precedence over config values
    root = directory if directory is not None else Path(cfg.dump.directory or ".")
    output_target = output if output is not None else (cfg.dump.output or None)
    actual_top_n = top_n if top_n is not None else cfg.dump.top_n
    show_largest = largest_files if largest_files is not None else cfg.dump.show_largest_files

    service = DumpService(filter_options=cfg.filters)

    try:
        result = asyncio.run(
            service.run(
                root,
                output=output_target,
                fmt=fmt,
                top_n=actual_top_n,
                show_largest_files=show_largest,
            )
        )
    except CodeDumpError as e:
        render_error(str(e), console)
        raise typer.Exit(1)

    if show_largest:
        render_largest_files(result.largest_files, console)

    render_success(
        f"Dumped {result.file_count} file(s) from {display_path(result.root)} "
        f"to {display_path(result.output_path)} "
        f"({result.output_type.value} format)",
        console,
    )
    if result.error_count:
        render_warning(
            f"{result.error_count} entr{'y' if result.error_count == 1 else 'ies'} "
            f"could not be read; see inline notices in the output",
            console,
        )


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(
        Path(CONFIG_FILENAMES[0]), help="Configuration file to create (.yaml, .yml or .json)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
):
    """Write the built-in configuration to a file for editing."""
    if path.exists() and not force:
        if not typer.confirm(f"{path} already exists. Overwrite?", default=False):
            render_warning(f"Left existing {path} unchanged", console)
            raise typer.Exit(1)

    try:
        CodeDumpConfig().save(path)
    except (OSError, ValueError) as e:
        render_error(str(e), console)
        raise typer.Exit(1)

    render_success(f"Configuration written to {path}", console)


if __name__ == "__main__":
    app()
