import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from .exceptions import OutputExistsError, ScanSetupError
from .models import ScanOutcome
from .scanning.filesystem import DirectoryWalker
from . import config


class InventoryApp:
    def __init__(self, walker: Optional[DirectoryWalker] = None):
        self.walker = walker or DirectoryWalker()

    def run(self,
            root: Path,
            output: Optional[Path] = None,
            with_bom: bool = False,
            force: bool = False,
            stdout: Optional[TextIO] = None) -> ScanOutcome:
        """
        Scans root into a new CSV file, or to stdout when output is None.

        Raises:
            OutputExistsError: output already exists (never overwritten).
            ScanSetupError: root cannot be listed.
            OSError: output cannot be created.
        """
        logging.info(f"Scanning {root}")

        if output is None:
            if with_bom:
                logging.warning("--with-bom only applies to --output files; ignored for stdout")
            stream = stdout or sys.stdout
            outcome = self.walker.walk(root, stream)
            stream.flush()
            return outcome

        if force:
            # Overwrite is declared on the CLI but deliberately not implemented
            logging.warning("--force has no effect yet; existing files are never overwritten")

        encoding = config.BOM_ENCODING if with_bom else config.OUTPUT_ENCODING
        try:
            f = open(output, "x", newline="", encoding=encoding)
        except FileExistsError as e:
            raise OutputExistsError(f"Output file {output} already exists, not overwriting") from e

        try:
            with f:
                outcome = self.walker.walk(root, f)
        except ScanSetupError:
            # Nothing but the BOM can have been written; don't leave an empty file behind
            output.unlink(missing_ok=True)
            raise

        logging.info(f"Wrote {output}")
        return outcome
