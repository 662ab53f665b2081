import os
import logging
from pathlib import Path, PurePath
from typing import Iterator, List, Optional, Tuple, TextIO, Union
from concurrent.futures import ThreadPoolExecutor, as_completed

from tqdm import tqdm

from .. import config
from ..exceptions import ScanSetupError
from ..models import FileRecord, ScanOutcome
from ..metadata.extract import MetadataExtractor
from ..reporting import header_line, record_line
from .hasher import FileHasher

# (path, csv line, error); exactly one of line/error is set
FileResult = Tuple[Path, Optional[str], Optional[Exception]]


class DirectoryWalker:
    def __init__(self,
                 max_workers: int = config.DEFAULT_MAX_WORKERS,
                 separator: str = config.DEFAULT_SEPARATOR,
                 extended: bool = False,
                 hasher: Optional[FileHasher] = None,
                 extractor: Optional[MetadataExtractor] = None,
                 show_progress: bool = False):
        self.hasher = hasher or FileHasher()
        self.metadata = extractor or MetadataExtractor()
        self.max_workers = max(1, min(max_workers, config.MAX_WORKERS_LIMIT))
        self.separator = separator
        self.extended = extended
        self.show_progress = show_progress

    def walk(self,
             root: Union[str, Path],
             sink: TextIO,
             relative_to: Optional[Union[str, PurePath]] = None) -> ScanOutcome:
        """
        Writes the CSV header and one row per regular file under root to sink.

        Directories are visited depth-first; all files of a directory are
        written before any of its sub-directories, siblings in listing order.
        Per-file problems never stop the walk: they end up in
        ScanOutcome.failures (errors) or ScanOutcome.skipped (symlinks and
        special files, logged as warnings).

        Args:
            relative_to: Prefix stripped for the rel_path column (default: root).

        Raises:
            ScanSetupError: root cannot be listed. Nothing has been written yet.
        """
        root = Path(root)
        try:
            root_entries = self._list_directory(root)
        except OSError as e:
            raise ScanSetupError(f"Cannot list scan root {root}: {e}") from e

        rel_root = root if relative_to is None else relative_to
        outcome = ScanOutcome()
        sink.write(header_line(self.separator, self.extended) + "\n")

        with tqdm(desc="Scanning", unit="file", disable=not self.show_progress) as progress:
            if self.max_workers <= 1:
                self._walk_tree(root, root_entries, rel_root, sink, outcome, progress, None)
            else:
                logging.info(f"Parallel scan with {self.max_workers} workers")
                with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                    self._walk_tree(root, root_entries, rel_root, sink, outcome, progress, executor)

        logging.info(f"Scan complete: {outcome.summary()}")
        return outcome

    def _walk_tree(self,
                   root: Path,
                   root_entries: List[os.DirEntry],
                   rel_root,
                   sink: TextIO,
                   outcome: ScanOutcome,
                   progress: tqdm,
                   executor: Optional[ThreadPoolExecutor]):
        """Explicit work-list instead of recursion, so depth is unbounded."""
        stack: List[Tuple[Path, Optional[List[os.DirEntry]]]] = [(root, root_entries)]
        while stack:
            current, entries = stack.pop()
            if entries is None:
                try:
                    entries = self._list_directory(current)
                except OSError as e:
                    logging.error(f"Cannot list directory {current}: {e}")
                    outcome.failures.append((current, e))
                    continue

            outcome.directories += 1
            logging.debug(f"Directory {current}: {len(entries)} entries")
            progress.set_postfix_str(str(current), refresh=False)

            files, dirs = self._partition(entries, outcome)

            for path, line, error in self._process_files(files, rel_root, executor):
                progress.update(1)
                if error is not None:
                    logging.error(f"Failed to scan {path}: {error}")
                    outcome.failures.append((path, error))
                    continue
                try:
                    sink.write(line + "\n")
                except (OSError, ValueError) as e:
                    logging.error(f"Failed to write row for {path}: {e}")
                    outcome.failures.append((path, e))
                else:
                    outcome.rows_written += 1

            # Reversed so the first listed sub-directory is popped first
            for d in reversed(dirs):
                stack.append((Path(d.path), None))

    def _list_directory(self, path: Path) -> List[os.DirEntry]:
        """
        Lists one directory, sorted by lower-cased name for a stable order.

        Failing to open the directory raises OSError. An error while reading
        entries is logged and the entries read so far are kept.
        """
        entries = []
        with os.scandir(path) as it:
            while True:
                try:
                    entry = next(it)
                except StopIteration:
                    break
                except OSError as e:
                    logging.error(f"Error reading entries of {path}: {e}")
                    break
                entries.append(entry)

        entries.sort(key=lambda e: e.name.lower())
        return entries

    def _partition(self,
                   entries: List[os.DirEntry],
                   outcome: ScanOutcome) -> Tuple[List[os.DirEntry], List[os.DirEntry]]:
        """Splits entries into (files, dirs). Everything else is a warning."""
        files = []
        dirs = []
        for e in entries:
            try:
                if e.is_symlink():
                    logging.warning(f"Skipping symlink: {e.path}")
                    outcome.skipped.append(Path(e.path))
                elif e.is_dir(follow_symlinks=False):
                    dirs.append(e)
                elif e.is_file(follow_symlinks=False):
                    files.append(e)
                else:
                    logging.warning(f"Skipping special file: {e.path}")
                    outcome.skipped.append(Path(e.path))
            except OSError as err:
                logging.error(f"Cannot determine file type of {e.path}: {err}")
                outcome.failures.append((Path(e.path), err))
        return files, dirs

    def _process_files(self,
                       files: List[os.DirEntry],
                       rel_root,
                       executor: Optional[ThreadPoolExecutor]) -> Iterator[FileResult]:
        """
        Yields one result per file. With an executor the files of this
        directory run concurrently and come back in completion order; every
        task is awaited, a failure never cancels its siblings.
        """
        if executor is None:
            for entry in files:
                yield self._process_single_file(entry, rel_root)
            return

        futures = [executor.submit(self._process_single_file, entry, rel_root) for entry in files]
        for future in as_completed(futures):
            yield future.result()

    def _process_single_file(self, entry: os.DirEntry, rel_root) -> FileResult:
        """Builds the record and renders its line in the worker; never touches the sink."""
        path = Path(entry.path)
        try:
            record = FileRecord.from_entry(entry, self.hasher, self.metadata)
            line = record_line(record, rel_root, self.separator, self.extended)
        except OSError as e:
            return path, None, e
        logging.debug(f"Hashed {path}")
        return path, line, None
