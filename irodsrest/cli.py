"""Command-line interface for irodsrest."""

import sys
import logging
import argparse
from getpass import getpass
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

logger = logging.getLogger(__name__)

from irodsrest import __version__
from irodsrest.config.loader import load_config, get_config_value, ConfigError
from irodsrest.config.validator import validate_config, ValidationError
from irodsrest.obfuscation.decoder import (
    default_secret_path,
    inspect_blob,
    obfi_decode,
    read_secret_file,
)
from irodsrest.obfuscation.encoder import write_secret_file
from irodsrest.obfuscation.errors import ObfuscationError

console = Console()
err_console = Console(stderr=True)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog='irodsrest',
        description='Read and write the obfuscated iRODS password file (.irodsA)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check that ~/.irods/.irodsA decodes (password stays hidden)
  irodsrest decode

  # Print the decoded password
  irodsrest decode --show

  # Show key index, header fields and validation problems
  irodsrest inspect --secret-file /path/to/.irodsA

  # Store a new password (prompts for it)
  irodsrest encode
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=Path,
        metavar='PATH',
        help='Path to irodsrest.yaml (optional; used for secret_file and logging)'
    )

    parser.add_argument(
        '--secret-file',
        type=Path,
        metavar='PATH',
        help='Obfuscated password file (default: ~/.irods/.irodsA). Overrides config.'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Log level. Overrides config.'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    decode_parser = subparsers.add_parser('decode', help='Decode the password file')
    decode_parser.add_argument(
        '--show',
        action='store_true',
        help='Print the decoded password instead of a masked confirmation'
    )

    subparsers.add_parser('inspect', help='Show header fields without decoding the body')

    encode_parser = subparsers.add_parser('encode', help='Obfuscate and store a password')
    encode_parser.add_argument(
        '--key-index',
        type=int,
        choices=range(16),
        metavar='N',
        help='Seq table index 0-15 (default: random)'
    )

    return parser


def _setup_logging(config: dict) -> None:
    """
    Setup logging configuration from config.

    Args:
        config: Configuration dictionary
    """
    logging_config = config.get('logging', {})

    # Get log level
    level_str = logging_config.get('level', 'WARNING').upper()
    level = getattr(logging, level_str, logging.WARNING)

    handlers = []

    if logging_config.get('console', True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        formatter = logging.Formatter('%(levelname)s: %(message)s')
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    # File handler (if configured)
    log_file = logging_config.get('file')
    if log_file:
        try:
            log_path = Path(log_file).expanduser()
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(level)
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except (OSError, PermissionError) as e:
            print(f"Error: Could not create log file '{log_file}': {e}", file=sys.stderr)
            sys.exit(1)

    # Configure root logger
    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True  # Override any existing configuration
    )


def _load_optional_config(config_path: Optional[Path]) -> dict:
    """Load config if given; an explicit path that fails is an error."""
    if config_path is None:
        return {'irods': {}, 'logging': {}}
    config = load_config(str(config_path))
    validate_config(config, require_connection=False)
    return config


def run_decode(secret_file: Path, show: bool) -> int:
    password = obfi_decode(secret_file)
    if show:
        console.print(password, markup=False, highlight=False, soft_wrap=True)
    else:
        console.print(f"[green]✓[/green] {secret_file} decodes ({len(password)} characters)", soft_wrap=True)
    return 0


def run_inspect(secret_file: Path) -> int:
    blob, metadata = read_secret_file(secret_file)
    report = inspect_blob(blob, metadata)

    table = Table(title=str(secret_file))
    table.add_column("Field")
    table.add_column("Value")

    table.add_row("Length", str(report.length))
    table.add_row("File mtime", f"{metadata.mtime} (low 16 bits: {metadata.time_value})")
    table.add_row("Owner uid", f"{metadata.uid} (masked: {metadata.owner_id})")

    if report.context is not None:
        table.add_row("Key index", str(report.context.key_index))
        table.add_row("Seq constant", f"0x{report.context.seq_constant:08x}")
    if report.header is not None:
        table.add_row("Leading byte", repr(chr(report.header.leading_byte)))
        table.add_row("Sentinel", repr(chr(report.header.sentinel)))
        table.add_row("Encoded time", str(report.header.encoded_time))

    console.print(table)

    if report.valid:
        console.print("[green]✓[/green] Header is valid")
        return 0

    for problem in report.problems:
        err_console.print(f"[red]✗[/red] {problem}", highlight=False, soft_wrap=True)
    return 1


def run_encode(secret_file: Path, key_index: Optional[int]) -> int:
    try:
        password = getpass("iRODS password: ")
        repeated = getpass("Repeat password: ") if password else ""
    except EOFError:
        err_console.print("[red]Error:[/red] no password entered (stdin closed)")
        return 1

    if not password:
        err_console.print("[red]Error:[/red] empty password")
        return 1
    if repeated != password:
        err_console.print("[red]Error:[/red] passwords do not match")
        return 1

    path = write_secret_file(password, secret_file, key_index=key_index)
    console.print(f"[green]✓[/green] Stored obfuscated password in {path}", soft_wrap=True)
    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for irodsrest CLI.

    Args:
        argv: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_optional_config(args.config)
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.log_level:
        config.setdefault('logging', {})['level'] = args.log_level

    _setup_logging(config)

    secret_file = args.secret_file or get_config_value(config, 'irods.secret_file')
    secret_file = Path(secret_file).expanduser() if secret_file else default_secret_path()

    try:
        if args.command == 'decode':
            return run_decode(secret_file, args.show)
        if args.command == 'inspect':
            return run_inspect(secret_file)
        if args.command == 'encode':
            return run_encode(secret_file, args.key_index)
    except ObfuscationError as e:
        logger.debug(f"{args.command} failed: {e.reason.value}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 130

    parser.error(f"unknown command: {args.command}")
    return 2


if __name__ == '__main__':
    sys.exit(main())
