"""Command-line interface for assetdeploy."""

import argparse
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import filters
from .archives import ArchiveHandler
from .config import Config, load_config_file, user_config_path
from .errors import AssetDeployError
from .writer import ResourceWriter

logger = logging.getLogger(__name__)

EXAMPLE_CONFIG_RESOURCE = "resources/example-config.toml"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def setup_logging(level: str = "INFO") -> None:
    """Set up logging with rich handler."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def build_config(args: argparse.Namespace) -> Config:
    """Build config from TOML file, env vars, and CLI args."""
    config_path = Path(args.config) if getattr(args, "config", None) else None
    file_config = load_config_file(config_path)

    # Environment variables outrank the file
    prefix = Config.model_config["env_prefix"]
    file_config = {
        key: value
        for key, value in file_config.items()
        if f"{prefix}{key}".upper() not in os.environ
    }

    cli_overrides = {}
    if getattr(args, "log_level", None):
        cli_overrides["log_level"] = args.log_level
    if getattr(args, "package", None):
        cli_overrides["anchor_package"] = args.package

    merged = {**file_config, **cli_overrides}
    return Config(**merged)


def run_extract(args: argparse.Namespace) -> int:
    """Copy resources from a locator into a directory."""
    config = build_config(args)
    setup_logging(config.log_level)
    console = Console()

    path_filter = filters.all_of(
        filters.matching(*args.include) if args.include else None,
        filters.excluding(*args.exclude) if args.exclude else None,
        filters.missing_only if args.missing_only else None,
    )

    writer = ResourceWriter(config=config)
    try:
        result = writer.copy_resources(args.locator, Path(args.destination), path_filter)
    except (OSError, AssetDeployError) as e:
        console.print(f"[red]Copy failed: {e}[/red]")
        return 1

    console.print(
        f"[green]{len(result.files)} files[/green], "
        f"{len(result.directories)} directories written to {result.destination}"
    )
    if result.skipped:
        console.print(f"[dim]{len(result.skipped)} entries skipped[/dim]")
    if not result.ok:
        console.print(f"[yellow]Extraction incomplete: {result.error}[/yellow]")
        return 1
    return 0


def run_write(args: argparse.Namespace) -> int:
    """Write one bundled resource to a file."""
    config = build_config(args)
    setup_logging(config.log_level)
    console = Console()

    writer = ResourceWriter(config=config)
    try:
        output = writer.write_resource(args.resource, Path(args.destination))
    except OSError as e:
        console.print(f"[red]{e}[/red]")
        return 1

    console.print(f"[green]Wrote {output}[/green]")
    return 0


def run_list(args: argparse.Namespace) -> int:
    """Show the entries of an archive."""
    config = build_config(args)
    setup_logging(config.log_level)
    console = Console()

    try:
        info = ArchiveHandler().list_contents(Path(args.archive))
    except (OSError, AssetDeployError) as e:
        console.print(f"[red]{e}[/red]")
        return 1

    table = Table(title=f"{info.path} ({info.format})")
    table.add_column("Entry", justify="left")
    table.add_column("Size", justify="right")
    table.add_column("Modified", justify="left")

    for entry in info.entries:
        modified = entry.modified_time.strftime("%Y-%m-%d %H:%M") if entry.modified_time else ""
        size = "" if entry.is_directory else str(entry.size)
        table.add_row(entry.name, size, modified)

    console.print(table)
    console.print(
        f"{info.file_count} files, {info.directory_count} directories, "
        f"{info.total_size} bytes"
    )
    return 0


def run_setup(args: argparse.Namespace) -> int:
    """Create config file."""
    console = Console()

    if args.output:
        output_path = Path(args.output)
    elif args.user:
        output_path = user_config_path()
    else:
        output_path = Path.cwd() / "assetdeploy.toml"

    if output_path.exists() and not args.force:
        console.print(f"[yellow]Config file already exists: {output_path}[/yellow]")
        console.print("Use --force to overwrite.")
        return 1

    writer = ResourceWriter(package=__package__, config=Config())
    writer.write_resource(EXAMPLE_CONFIG_RESOURCE, output_path)

    console.print(f"[green]Created config file: {output_path}[/green]")
    console.print("Edit this file to configure your settings.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assetdeploy",
        description="Extract bundled resources from archives and directories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Extract command
    extract_parser = subparsers.add_parser("extract", help="Copy resources into a directory")
    extract_parser.add_argument("locator", help="jar:/zip:/tar: URL, file:// URL, or path")
    extract_parser.add_argument("destination", help="Destination directory")
    extract_parser.add_argument("--include", "-i", action="append", default=[],
        help="Only write files matching this glob (repeatable)")
    extract_parser.add_argument("--exclude", "-x", action="append", default=[],
        help="Skip files matching this glob (repeatable)")
    extract_parser.add_argument("--missing-only", action="store_true",
        help="Do not overwrite files that already exist")
    extract_parser.add_argument("--config", "-c", help="Config file path")
    extract_parser.add_argument("--log-level", choices=LOG_LEVELS)

    # Write command
    write_parser = subparsers.add_parser("write", help="Write a single bundled resource")
    write_parser.add_argument("resource", help="Resource name relative to the package")
    write_parser.add_argument("destination", help="Destination file")
    write_parser.add_argument("--package", "-p", help="Package containing the resource")
    write_parser.add_argument("--config", "-c", help="Config file path")
    write_parser.add_argument("--log-level", choices=LOG_LEVELS)

    # List command
    list_parser = subparsers.add_parser("list", help="List the entries of an archive")
    list_parser.add_argument("archive", help="Archive file")
    list_parser.add_argument("--config", "-c", help="Config file path")
    list_parser.add_argument("--log-level", choices=LOG_LEVELS)

    # Setup command
    setup_parser = subparsers.add_parser("setup", help="Create a config file")
    setup_parser.add_argument("--output", "-o", help="Output path for config file")
    setup_parser.add_argument("--user", "-u", action="store_true", help="Create in the user config directory")
    setup_parser.add_argument("--force", "-f", action="store_true", help="Overwrite existing config file")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "extract":
        return run_extract(args)
    elif args.command == "write":
        return run_write(args)
    elif args.command == "list":
        return run_list(args)
    elif args.command == "setup":
        return run_setup(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
