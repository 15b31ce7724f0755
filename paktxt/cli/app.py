"""Typer-based CLI application for paktxt."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from paktxt import __version__
from paktxt.core.config import PaktxtConfig, load_config
from paktxt.core.errors import PaktxtError
from paktxt.core.restorer import ArchiveRestorer
from paktxt.core.scanner import FileCollector, is_git_repo
from paktxt.core.serializer import ArchiveSerializer
from paktxt.storage.transport import (
    copy_to_clipboard,
    read_archive_file,
    read_from_clipboard,
    resolve_output_path,
    write_archive_file,
)
from paktxt.utils.formatters import format_size, pluralize

app = typer.Typer(
    name="paktxt",
    help="Consolidate text files into one .paktxt archive and restore them",
    add_completion=False,
)


def version_callback(value: bool):
    """Display version and exit."""
    if value:
        typer.echo(f"paktxt {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
):
    """Paktxt - pack a directory of text files into a single text archive.

    'pack' writes the archive to a file or the clipboard, 'unpack' restores
    the files byte-for-byte, including executable bits.
    """
    pass


def configure_logging(log_level: str) -> None:
    """Configure root logging from a --log-level value.

    Raises:
        typer.Exit: If the level is not one of debug, info, warn, error
    """
    log_level_upper = log_level.upper()
    if log_level_upper not in ["DEBUG", "INFO", "WARN", "WARNING", "ERROR"]:
        typer.echo(
            f"❌ Invalid log level: {log_level}. "
            "Must be debug, info, warn, or error.",
            err=True,
        )
        raise typer.Exit(1)

    # Map WARN to WARNING for Python logging
    if log_level_upper == "WARN":
        log_level_upper = "WARNING"

    logging.basicConfig(
        level=getattr(logging, log_level_upper),
        format="%(message)s",
    )


def resolve_working_dir(working_dir: Optional[Path], create: bool = False) -> Path:
    """Resolve the directory to operate in (default: current directory).

    Raises:
        typer.Exit: If the directory is missing (and not created) or not a
            directory
    """
    path = (working_dir or Path(".")).expanduser().resolve()

    if not path.exists():
        if not create:
            typer.echo(f"❌ Working directory does not exist: {path}", err=True)
            raise typer.Exit(1)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            typer.echo(f"❌ Cannot create working directory: {e}", err=True)
            raise typer.Exit(1) from e
    elif not path.is_dir():
        typer.echo(f"❌ Working directory is not a directory: {path}", err=True)
        raise typer.Exit(1)

    if working_dir is not None:
        typer.echo(f"Using working directory: {path}")
    return path


def load_effective_config(
    config_path: Optional[Path],
    working_dir: Path,
    exclude: Optional[str],
    filter_: Optional[str],
) -> PaktxtConfig:
    """Load YAML defaults and apply CLI pattern overrides.

    Raises:
        typer.Exit: If the config file is invalid
    """
    try:
        config = load_config(config_path, search_dir=working_dir)
    except PaktxtError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e
    return config.merged(exclude=exclude, filter=filter_)


def check_source_choice(
    command: str, clipboard: bool, path_option: Optional[str], flag: str
) -> None:
    """Require exactly one of --clipboard and a file option.

    Raises:
        typer.Exit: If both or neither were given
    """
    if clipboard and path_option:
        typer.echo(
            f"❌ Cannot use --clipboard/-b and {flag} simultaneously "
            f"with '{command}' command.",
            err=True,
        )
        raise typer.Exit(1)
    if not clipboard and not path_option:
        typer.echo(
            f"❌ '{command}' command requires either --clipboard/-b or {flag}.",
            err=True,
        )
        raise typer.Exit(1)


@app.command()
def pack(  # noqa: C901
    clipboard: Annotated[
        bool,
        typer.Option("--clipboard", "-b", help="Pack content to clipboard"),
    ] = False,
    output_file: Annotated[
        Optional[str],
        typer.Option(
            "--output-file",
            "-o",
            help="Output filename ('.paktxt' is appended when there is no extension)",
        ),
    ] = None,
    exclude: Annotated[
        Optional[str],
        typer.Option(
            "--exclude",
            "-e",
            help="Comma-separated glob patterns to exclude (e.g., '*.md,temp/*')",
        ),
    ] = None,
    filter_: Annotated[
        Optional[str],
        typer.Option(
            "--filter",
            "-f",
            help="Comma-separated glob patterns; only matching files are packed",
        ),
    ] = None,
    working_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--working-dir",
            "-w",
            help="Directory to pack instead of the current directory",
        ),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option(help="YAML config file (default: .paktxt.yaml if present)"),
    ] = None,
    # Runtime options (hidden from help - for developers)
    log_level: Annotated[
        str,
        typer.Option(
            help="Logging level (debug, info, warn, error)",
            case_sensitive=False,
            hidden=True,
        ),
    ] = "info",
):
    """Consolidate files and output them to the clipboard or a file.

    Examples:
        paktxt pack -b
        paktxt pack -o my_project
        paktxt pack -e '*.log,*.tmp' -f '*.py,*.md' -o my_project.paktxt
    """
    configure_logging(log_level)

    # Resolve the output path against the invocation directory first
    output_path: Optional[Path] = None
    if output_file:
        output_path = resolve_output_path(output_file)

    source = resolve_working_dir(working_dir)
    settings = load_effective_config(config, source, exclude, filter_)

    if output_path is None and not clipboard and settings.output_file:
        output_path = resolve_output_path(settings.output_file)

    check_source_choice(
        "pack", clipboard, str(output_path) if output_path else None,
        "--output-file/-o",
    )

    # === STEP 1: Collect files ===
    typer.echo("🔍 Scanning files for concatenation...")
    if is_git_repo(source):
        typer.echo("   Git repository detected, scanning directory recursively.")
    else:
        typer.echo("   No Git repository detected. Scanning all files recursively.")

    try:
        collector = FileCollector(
            source_root=source,
            exclude_patterns=settings.exclude,
            filter_patterns=settings.filter,
        )
        files = collector.collect()
    except (OSError, PaktxtError) as e:
        typer.echo(f"❌ Failed to get file list: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(f"   Found {pluralize(len(files), 'file')}")

    # === STEP 2: Serialize ===
    serializer = ArchiveSerializer(source)
    archive_text = serializer.serialize(files)

    # === STEP 3: Output ===
    if clipboard:
        typer.echo("📋 Copying content to clipboard...")
        try:
            copy_to_clipboard(archive_text)
        except PaktxtError as e:
            typer.echo(f"❌ {e}", err=True)
            raise typer.Exit(1) from e
        typer.echo("✅ Content successfully copied to clipboard.")
    else:
        typer.echo(f"📦 Writing content to {output_path}...")
        try:
            size = write_archive_file(output_path, archive_text)
        except OSError as e:
            typer.echo(f"❌ Failed to write to file {output_path}: {e}", err=True)
            raise typer.Exit(1) from e
        typer.echo(
            f"✅ Content successfully written to {output_path} "
            f"({format_size(size)})."
        )

    typer.echo(
        f"   Packed {pluralize(serializer.files_packed, 'file')}"
        + (
            f", skipped {len(serializer.files_skipped)}"
            if serializer.files_skipped
            else ""
        )
    )


@app.command()
def unpack(
    clipboard: Annotated[
        bool,
        typer.Option("--clipboard", "-b", help="Unpack content from clipboard"),
    ] = False,
    paktxt_file: Annotated[
        Optional[Path],
        typer.Option(
            "--paktxt-file", "-i", help="Input .paktxt filename for restoration"
        ),
    ] = None,
    exclude: Annotated[
        Optional[str],
        typer.Option(
            "--exclude",
            "-e",
            help="Comma-separated glob patterns not to restore (e.g., 'config.json,*.bak')",
        ),
    ] = None,
    filter_: Annotated[
        Optional[str],
        typer.Option(
            "--filter",
            "-f",
            help="Comma-separated glob patterns; only matching files are restored",
        ),
    ] = None,
    working_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--working-dir",
            "-w",
            help="Directory to restore into instead of the current directory",
        ),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option(help="YAML config file (default: .paktxt.yaml if present)"),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            help="Logging level (debug, info, warn, error)",
            case_sensitive=False,
            hidden=True,
        ),
    ] = "info",
):
    """Restore files from the clipboard or a .paktxt file.

    Examples:
        paktxt unpack -b
        paktxt unpack -i my_archive.paktxt -w /new/location
        paktxt unpack -f '*.html,*.css' -b
    """
    configure_logging(log_level)

    check_source_choice(
        "unpack", clipboard, str(paktxt_file) if paktxt_file else None,
        "--paktxt-file/-i",
    )

    # Resolve the input path against the invocation directory first
    if paktxt_file is not None:
        paktxt_file = paktxt_file.expanduser().resolve()

    destination = resolve_working_dir(working_dir, create=True)
    settings = load_effective_config(config, destination, exclude, filter_)

    # === STEP 1: Read archive ===
    try:
        if clipboard:
            typer.echo("📋 Reading content from clipboard for restoration...")
            archive_text = read_from_clipboard()
        else:
            typer.echo(f"📖 Reading content from file '{paktxt_file}'...")
            archive_text = read_archive_file(paktxt_file)
    except OSError as e:
        typer.echo(f"❌ Failed to read from paktxt file '{paktxt_file}': {e}", err=True)
        raise typer.Exit(1) from e
    except PaktxtError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1) from e

    if not archive_text:
        typer.echo(
            "❌ Input content is empty or contains no parsable paktxt data",
            err=True,
        )
        raise typer.Exit(1)

    # === STEP 2: Parse and restore ===
    typer.echo("📦 Parsing content and restoring files...")
    restorer = ArchiveRestorer(
        destination=destination,
        exclude_patterns=settings.exclude,
        filter_patterns=settings.filter,
    )
    try:
        result = restorer.restore(archive_text)
    except (OSError, PaktxtError) as e:
        typer.echo(f"❌ Error restoring files: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(
        f"   Restored {pluralize(len(result['restored']), 'file')}"
        + (f", skipped {len(result['skipped'])}" if result["skipped"] else "")
    )
    typer.echo("✅ Files restored successfully.")


if __name__ == "__main__":
    app()
