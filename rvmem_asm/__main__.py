#!/usr/bin/env python3
"""
rvmem Assembler - Command Line Interface

Usage:
    python3 -m rvmem_asm input.s
    python3 -m rvmem_asm input.s output.mif -v
    python3 -m rvmem_asm input.s --listing --config asm.yaml
"""

import argparse
import sys

from . import __version__
from .assembler import Assembler
from .config import AssemblerConfig, ConfigError, load_config
from .errors import AssemblerError, ErrorKind, FileAccessError
from .output import OUTPUT_FORMATS, write_output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rvmem-asm",
        description="RV32I assembler producing byte-per-line memory images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s programs/fib.s
  %(prog)s programs/fib.s build/fib.mif -v
  %(prog)s programs/fib.s --format hex --listing
        """,
    )

    parser.add_argument(
        "input",
        type=str,
        help="Input assembly file",
    )

    parser.add_argument(
        "output",
        type=str,
        nargs="?",
        help="Output file (default: memoria.mif, or 'output' from the config file)",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=str,
        help="YAML configuration file",
    )

    parser.add_argument(
        "-f",
        "--format",
        choices=sorted(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: binary)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Enable verbose output",
    )

    parser.add_argument(
        "-l",
        "--listing",
        action="store_true",
        help="Print assembly listing",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    verbose = bool(args.verbose)

    try:
        config = load_config(args.config) if args.config else AssemblerConfig()
        config = config.with_overrides(format=args.format, verbose=args.verbose)
        verbose = config.verbose
        output_path = args.output or config.output

        asm = Assembler(config)
        result = asm.assemble_file(args.input)

        if result.error is not None and result.error.kind == ErrorKind.FILE_ACCESS:
            raise result.error

        if result.error is not None:
            # Words encoded before the failing line are kept in the output
            print(f"Error: {result.error}", file=sys.stderr)
            try:
                write_output(output_path, result.words, config.format)
            except FileAccessError as e:
                print(f"Error: {e}", file=sys.stderr)
            return 1

        write_output(output_path, result.words, config.format)

        if args.listing:
            print("\n" + asm.get_listing())

        if verbose:
            print(f"\nAssembly successful: {len(result.words)} instructions")
        print(f"Assembly successful. Output written to {output_path}")
        return 0

    except (AssemblerError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
