"""CLI entrypoints for codeindex commands."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .config import HASH_ALGORITHMS, OUTPUT_FORMATS, STORE_LOCATIONS, ConfigError, IndexConfig, load_config
from .logging import configure_logging
from .manager import IndexManager, NoAdaptersDetectedError
from .stores import DecryptionError, decrypt_file

ENCRYPTION_KEY_ENV = "CODEINDEX_ENCRYPTION_KEY"


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError("value must be greater than zero")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codeindex",
        description="Build a navigable, size-bounded index of a source repository.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Scan a repository and write its index.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--format",
        dest="output_format",
        choices=OUTPUT_FORMATS,
        help="Output tier (default: structured).",
    )
    generate_parser.add_argument(
        "--hash",
        dest="hash_algorithm",
        choices=HASH_ALGORITHMS,
        help="Content hash algorithm (default: xxhash).",
    )
    generate_parser.add_argument(
        "--max-candidates",
        type=_positive_int,
        help="Number of top-ranked files to extract symbols from (default: 100).",
    )
    generate_parser.add_argument(
        "--max-output-kb",
        type=_positive_int,
        help="Truncate the rendered index beyond this size (default: 100).",
    )
    generate_parser.add_argument(
        "--output",
        help="Custom output path; relative paths resolve against the repository root.",
    )
    generate_parser.add_argument(
        "--store",
        choices=STORE_LOCATIONS,
        help="Where to write the index: the repository, ~/.codeindex, or both.",
    )
    generate_parser.add_argument(
        "--encrypt",
        action="store_true",
        default=None,
        help=f"Encrypt the written index with the passphrase in ${ENCRYPTION_KEY_ENV}.",
    )
    generate_parser.add_argument(
        "--languages",
        help="Comma-separated adapters to use instead of auto-detection (e.g. go,python).",
    )
    generate_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the index instead of writing it to disk.",
    )

    decrypt_parser = subparsers.add_parser(
        "decrypt",
        help="Decrypt an encrypted index file.",
    )
    _add_verbose_option(decrypt_parser, suppress_default=True)
    decrypt_parser.add_argument("file", help="Encrypted index file (*.enc).")
    decrypt_parser.add_argument(
        "--output",
        help="Write the plaintext here instead of printing it.",
    )

    return parser


def _resolve_config(args: argparse.Namespace) -> IndexConfig:
    config = load_config(Path(args.path))
    if args.output_format:
        config.output_format = args.output_format
    if args.hash_algorithm:
        config.hash_algorithm = args.hash_algorithm
    if args.max_candidates:
        config.max_candidates = args.max_candidates
    if args.max_output_kb:
        config.max_output_kb = args.max_output_kb
    if args.output:
        config.output_path = args.output
    if args.store:
        config.store = args.store
    if args.encrypt:
        config.encrypt = True
    if args.languages:
        config.languages = [name.strip().lower() for name in args.languages.split(",") if name.strip()]
    if args.verbose:
        config.verbose = True
    config.encryption_key = os.environ.get(ENCRYPTION_KEY_ENV) or None
    return config


def _run_generate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if not Path(args.path).expanduser().is_dir():
        parser.exit(1, f"Repository path not found or not a directory: {args.path}\n")
    try:
        config = _resolve_config(args)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if config.encrypt and not config.encryption_key and not args.stdout:
        parser.exit(1, f"Encryption requested but ${ENCRYPTION_KEY_ENV} is not set\n")

    manager = IndexManager(config)
    try:
        if args.stdout:
            result = manager.generate()
        else:
            result = manager.run()
    except NoAdaptersDetectedError as exc:
        parser.exit(1, f"{exc}\n")
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except Exception as exc:  # pragma: no cover
        parser.exit(1, f"codeindex generate failed: {exc}\nRun with --verbose for more details.\n")

    if args.stdout:
        sys.stdout.write(result.content)
        if not result.content.endswith("\n"):
            sys.stdout.write("\n")
        return
    print(
        f"Index written to {_relativize(Path(result.output_path or ''))} "
        f"({result.file_count} files, {', '.join(result.languages)})"
    )


def _run_decrypt(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    passphrase = os.environ.get(ENCRYPTION_KEY_ENV)
    if not passphrase:
        parser.exit(1, f"${ENCRYPTION_KEY_ENV} must be set to decrypt\n")
    try:
        plaintext = decrypt_file(Path(args.file), passphrase)
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except DecryptionError as exc:
        parser.exit(1, f"{exc}\n")

    if args.output:
        target = Path(args.output).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(plaintext)
        print(f"Decrypted index written to {_relativize(target)}")
    else:
        sys.stdout.write(plaintext.decode("utf-8"))


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for codeindex commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "generate":
        _run_generate(parser, args)
    elif args.command == "decrypt":
        _run_decrypt(parser, args)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
