import tempfile, os
from typing import Optional, Union
from pathlib import Path
from cleartxt.recovery import FileOperationError
from cleartxt.logs import get_logger

log = get_logger("io")

def _cleanup(temp_path):
    if temp_path is None or not os.path.exists(temp_path):
        return
    try:
        os.unlink(temp_path)
        log.debug(f"Cleaned up temporary file: {temp_path}")
    except OSError as cleanup_error:
        # Don't raise while already handling a failure, just log
        log.warning(f"Could not clean up temp file {temp_path}: {cleanup_error}")

def _create_dirs(file_path: Path):
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
    except (OSError, PermissionError) as e:
        error_msg = f"Cannot create directory {file_path.parent}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg, file_path) from e

def atomic_write_text(file_path: Union[Path, str], text: str, create_dirs: bool = True) -> None:
    """
    Save text to a file using an atomic replace.

    The target is either fully replaced or left untouched; a partial write
    never reaches it.

    Raises:
        FileOperationError: the directory, temp file, write or replace failed.
    """
    file_path = Path(file_path)
    temp_path = None

    if create_dirs:
        _create_dirs(file_path)

    try:
        # Temp file in the same directory as the target keeps os.replace atomic
        # Undecodable bytes read via surrogateescape are written back unchanged
        with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', errors='surrogateescape', newline='\n',
                                         dir=file_path.parent, prefix=f".{file_path.name}.", suffix='.tmp', delete=False) as temp_file:
            temp_path = temp_file.name
            written = temp_file.write(text)
            if written != len(text):
                raise OSError(f"short write ({written} of {len(text)} characters)")
            temp_file.flush()
            os.fsync(temp_file.fileno())

        os.replace(temp_path, file_path)
        log.debug(f"Saved {file_path}")

    except (IOError, OSError) as e:
        _cleanup(temp_path)
        error_msg = f"I/O error saving {file_path}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg, file_path) from e

class TextStore:
    """The todo file on disk, seen as a single blob of text."""

    def __init__(self, path: Union[Path, str]):
        self.path = Path(path)

    def read(self) -> Optional[str]:
        """
        Return the file contents, or None if the file can't be opened.

        A missing or unopenable file is the normal first-run case and is not
        an error. Bytes that are not valid UTF-8 come back as surrogate escapes
        so a later write() restores them as they were.

        Raises:
            FileOperationError: the file opened but reading it failed.
        """
        try:
            f = open(self.path, 'r', encoding='utf-8', errors='surrogateescape', newline='')
        except OSError as e:
            log.debug(f"No readable todo file at {self.path}: {e}")
            return None

        with f:
            try:
                return f.read()
            except OSError as e:
                error_msg = f"Failed to read file {self.path}: {e}"
                log.error(error_msg)
                raise FileOperationError(error_msg, self.path) from e

    def write(self, text: str) -> None:
        """Replace the file contents; raises FileOperationError on failure."""
        atomic_write_text(self.path, text)

    def __repr__(self) -> str:
        return f"TextStore({str(self.path)!r})"
