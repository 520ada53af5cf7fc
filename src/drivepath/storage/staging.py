from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Iterable

from .errors import InvalidArgumentError, LocalIOError

logger = logging.getLogger(__name__)


class LocalFileSystem:
    """Local file operations used by the storage orchestrator.

    Every ``OSError`` is re-raised as :class:`LocalIOError` with the
    original message, chained to the original exception.
    """

    def open_source(self, path: str | Path) -> BinaryIO:
        """Open a local file that is about to be uploaded.

        Raises:
            InvalidArgumentError: If the path is a directory.
            LocalIOError: If the file cannot be opened.
        """
        source = Path(path)
        if source.is_dir():
            raise InvalidArgumentError(
                f"{source.name} is a folder.  You should call the create_folder method.",
                path=str(source),
            )
        try:
            return source.open("rb")
        except OSError as e:
            raise LocalIOError(str(e), path=str(source)) from e

    def write_stream(self, destination: str | Path, chunks: Iterable[bytes]) -> Path:
        """Write a stream of chunks to ``destination``, replacing any existing file.

        Chunks go to a temporary file next to ``destination`` which replaces
        it only once the stream is exhausted, so a failed stream leaves a
        previous copy intact. Missing parent directories are created.
        Errors raised while pulling chunks from ``chunks`` propagate
        unchanged.
        """
        target = Path(destination)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, partial_name = tempfile.mkstemp(
                dir=target.parent, prefix=f".{target.name}.", suffix=".part"
            )
        except OSError as e:
            raise LocalIOError(str(e), path=str(target)) from e

        partial = Path(partial_name)
        try:
            with os.fdopen(fd, "wb") as local_file:
                for chunk in chunks:
                    try:
                        local_file.write(chunk)
                    except OSError as e:
                        raise LocalIOError(str(e), path=str(target)) from e
            try:
                os.replace(partial, target)
            except OSError as e:
                raise LocalIOError(str(e), path=str(target)) from e
        finally:
            partial.unlink(missing_ok=True)

        logger.debug("Wrote %s", target)
        return target

    def open_for_read(self, path: str | Path) -> BinaryIO:
        try:
            return Path(path).open("rb")
        except OSError as e:
            raise LocalIOError(str(e), path=str(path)) from e

    def clear_directory(self, path: str | Path) -> None:
        """Delete everything inside ``path`` but keep the directory itself.

        A missing directory is treated as already clean.
        """
        directory = Path(path)
        if not directory.exists():
            return
        try:
            for entry in directory.iterdir():
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
        except OSError as e:
            raise LocalIOError(str(e), path=str(directory)) from e

        logger.info("Cleaned %s", directory)
