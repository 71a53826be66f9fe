#!/usr/bin/env python3
# Path: ban_extractor/main.py
"""
BAN Extractor - Main Entry Point

Extracts the record of one billing account number (BAN) from a large XML
bill extract and writes it as a standalone XML document.

Data Flow:
    INPUT:   Local file or file on an SSH server (XML or gzipped XML)
    PROCESS: Streaming scan for the record holding the BAN
    OUTPUT:  <input>.<BAN>.xml[.zip|.gz]

Usage:
    ban-extractor -b <BAN> -i <fileName>
    ban-extractor -b <BAN> -i <fileName> -o out.zip -f ZIP
    ban-extractor -b <BAN> -i <remote path> -s <server> -u <user> -k <key file>
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config_loader import ConfigLoader
from .constants import (
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_OK,
    MENU_HEADER,
    STATUS_FAIL,
    STATUS_OK,
    FileFormat,
)
from .core.logger import setup_ipo_logging, get_input_logger
from .core.ui.progress import IdentifierProgress
from .extractor import Extractor
from .models.error import ExtractionError


EPILOG = """
Examples:
  get XML from local or remote filesystem:
    ban-extractor -b <BAN> -i <fileName>
  get XML from SSH server with public key authentication:
    ban-extractor -b <BAN> -i /data/extracts/MOBILITY/0202/<SOME_NAME>.gz -s localhost -p 2222 -u ec2-user -k ec2-user_id_rsa
  get XML from SSH server with password authentication:
    ban-extractor -b <BAN> -i <fileName> -s <SSH_SERVER> -u <SOME_USER> -P <PASSWORD>

Notes:
  Input file can be either XML or gzipped XML, gzipped input is uncompressed on the fly
  Output file can be empty, then the file is created next to the input file
  If output file is a directory, the file name is constructed inside it
  File format specifies the output format, ZIP and GZIP are compressed on the fly
  Temporary files are not created
  No size limits for XML
"""


def print_banner() -> None:
    """Print application banner."""
    print()
    print(MENU_HEADER)
    print("  BAN EXTRACTOR")
    print("  Single record extraction from XML bill extracts")
    print(MENU_HEADER)
    print()


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog='ban-extractor',
        description='Extract the record of one BAN from a large XML extract',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG
    )

    parser.add_argument('-b', '--ban', required=True, metavar='BAN', help='BAN')
    parser.add_argument(
        '-i', '--input', required=True, metavar='fileName', help='Input file name'
    )
    parser.add_argument('-o', '--output', metavar='fileName', help='Output file name')
    parser.add_argument(
        '-f', '--format',
        default=FileFormat.XML.value,
        metavar='[XML|ZIP|GZIP]',
        help='Output file format [XML|ZIP|GZIP]'
    )
    parser.add_argument('-s', '--server', metavar='serverName', help='SSH server name')
    parser.add_argument('-p', '--port', type=int, metavar='port', help='SSH server port')
    parser.add_argument('-u', '--user', metavar='userName', help='User name for SSH server')
    parser.add_argument(
        '-P', '--password',
        metavar='password',
        help='Password for password authentication or for private key file'
    )
    parser.add_argument(
        '-k', '--key-file',
        metavar='fileName',
        help='Key file for public key authentication to login to SSH server'
    )
    parser.add_argument(
        '--record-tag', metavar='name', help='Element enclosing one record'
    )
    parser.add_argument(
        '--identifier-tag', metavar='name', help='Element holding the BAN'
    )
    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress banner and scanned BAN display'
    )

    return parser


def initialize_system() -> ConfigLoader:
    """
    Load configuration and set up logging.

    Returns:
        ConfigLoader instance
    """
    config = ConfigLoader()

    setup_ipo_logging(
        log_dir=config.get('log_dir'),
        log_level=config.get('log_level', 'INFO'),
        console_output=config.get('log_console', True)
    )

    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for ban_extractor.

    Args:
        argv: Command line arguments (sys.argv[1:] when None)

    Returns:
        Exit code (0 when the record was written, non-zero otherwise)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        file_format = FileFormat.parse(args.format)
    except ValueError as e:
        parser.error(str(e))

    if args.server and not args.user:
        parser.error("User name (-u) is mandatory for SSH server (-s)")
    if args.server and not args.password and not args.key_file:
        parser.error("Password (-P) or key file (-k) is mandatory for SSH server (-s)")

    if not args.quiet:
        print_banner()

    try:
        config = initialize_system()
        logger = get_input_logger('main')

        extractor = Extractor(
            identifier=args.ban,
            input_name=args.input,
            output=args.output,
            file_format=file_format,
            config=config,
            record_tag=args.record_tag,
            identifier_tag=args.identifier_tag,
            progress=None if args.quiet else IdentifierProgress()
        )

        if args.server:
            result = extractor.run_ssh(
                host=args.server,
                username=args.user,
                port=args.port,
                password=args.password,
                key_file=Path(args.key_file) if args.key_file else None
            )
        else:
            result = extractor.run_local()

    except ExtractionError as e:
        get_input_logger('main').error(f"{e.category}: {e}")
        if not args.quiet:
            print(f"\n{STATUS_FAIL} {e}")
        return EXIT_FAILURE

    except KeyboardInterrupt:
        print("\n[Interrupted]")
        return EXIT_INTERRUPTED

    if not result.found:
        if not args.quiet:
            print(f"\n{STATUS_FAIL} BAN {args.ban} not found in {args.input}")
        return EXIT_FAILURE

    logger.info(f"Extraction finished: {result.to_dict()}")
    if not args.quiet:
        print(f"\n{STATUS_OK} BAN {args.ban} written to {result.output_path}")
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
