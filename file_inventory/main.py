import argparse
import logging
import sys
from pathlib import Path

from tqdm.contrib.logging import logging_redirect_tqdm

from .core import InventoryApp
from .exceptions import FileInventoryError, OutputExistsError
from .scanning.filesystem import DirectoryWalker
from . import config


def setup_logging(verbose: bool):
    """Logs go to stderr; stdout may be carrying the CSV."""
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def separator_char(value: str) -> str:
    if len(value) != 1:
        raise argparse.ArgumentTypeError(f"separator must be exactly one character, got {value!r}")
    return value


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Hash every file under a directory and write a CSV inventory.")

    p.add_argument("dir", nargs="?", type=Path, default=Path("."), help="Directory to scan (default: current directory)")
    p.add_argument("-o", "--output", type=Path, default=None, help="Write the CSV to this file instead of stdout (must not exist)")
    p.add_argument("-f", "--force", action="store_true", help="Overwrite the output file (not implemented yet)")
    p.add_argument("--with-bom", action="store_true", help="Start the output file with a UTF-8 byte order mark")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every directory and file instead of a progress line")

    p.add_argument("-s", "--separator", type=separator_char, default=config.DEFAULT_SEPARATOR, help="Field separator (default: ',')")
    p.add_argument(
        "--max-workers",
        type=int,
        default=config.DEFAULT_MAX_WORKERS,
        help=f"Threads hashing the files of one directory (1 = sequential, max {config.MAX_WORKERS_LIMIT})"
    )
    p.add_argument("--extended", action="store_true", help="Append seen_from and local-time columns")

    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)

    walker = DirectoryWalker(
        max_workers=args.max_workers,
        separator=args.separator,
        extended=args.extended,
        show_progress=not args.verbose,
    )
    app = InventoryApp(walker)

    try:
        with logging_redirect_tqdm():
            outcome = app.run(args.dir, output=args.output, with_bom=args.with_bom, force=args.force)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except OutputExistsError as e:
        logging.warning(str(e))
        sys.exit(1)
    except (FileInventoryError, OSError) as e:
        logging.error(str(e))
        sys.exit(1)

    if outcome.ok:
        logging.info(outcome.summary())
    else:
        # Each failure was already logged as it happened
        logging.warning(outcome.summary())


if __name__ == "__main__":
    main()
